"""Baxoq.Store management CLI.

Usage:
    python src/manage.py setup-db                    # Create all tables
    python src/manage.py drop-db --domain ordering   # Drop one context's tables
    python src/manage.py create-admin --name Admin --email admin@baxoq.store --password ...
"""

import argparse
import sys

DOMAIN_NAMES = ["identity", "catalogue", "ordering", "support"]


def _domains(names=None):
    from catalogue.domain import catalogue
    from identity.domain import identity
    from ordering.domain import ordering
    from support.domain import support

    all_domains = {"identity": identity, "catalogue": catalogue, "ordering": ordering, "support": support}
    return {name: all_domains[name] for name in (names or DOMAIN_NAMES)}


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    from shared.db import setup_db

    for name, domain in _domains(domains).items():
        domain.init()
        providers = setup_db(domain)
        print(f"{name}: schema ready ({', '.join(providers) or 'in-memory, nothing to do'})")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    from shared.db import drop_db

    for name, domain in _domains(domains).items():
        domain.init()
        providers = drop_db(domain)
        print(f"{name}: schema dropped ({', '.join(providers) or 'in-memory, nothing to do'})")


def create_admin(name, email, password):
    """Register an administrator account; the public API only creates shoppers."""
    from identity.user.registration import RegisterUser

    identity = _domains(["identity"])["identity"]
    identity.init()
    with identity.domain_context():
        user_id = identity.process(
            RegisterUser(name=name, email=email, password=password, is_admin=True),
            asynchronous=False,
        )
    print(f"Admin {email} created with id {user_id}")


def main():
    parser = argparse.ArgumentParser(description="Baxoq.Store management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for command, help_text in (("setup-db", "Create all database tables"), ("drop-db", "Drop all database tables")):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument(
            "--domain",
            choices=DOMAIN_NAMES,
            nargs="*",
            help="Specific domain(s) (default: all)",
        )

    admin_parser = subparsers.add_parser("create-admin", help="Register an administrator")
    admin_parser.add_argument("--name", required=True)
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    elif args.command == "create-admin":
        create_admin(args.name, args.email, args.password)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
