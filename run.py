#!/usr/bin/env python3
"""
TrekHub launcher.

    python run.py --env production --port 8000
    python run.py --validate-env staging
    python run.py --migrate
"""

import os
import sys
import argparse

ENVIRONMENTS = ["development", "staging", "production", "testing"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TrekHub API Server")
    parser.add_argument("--env", choices=ENVIRONMENTS, default=None,
                        help="Environment to run (default: ENVIRONMENT or development)")

    server = parser.add_argument_group("server overrides")
    server.add_argument("--host", default=None)
    server.add_argument("--port", type=int, default=None)
    server.add_argument("--workers", type=int, default=None)
    server.add_argument("--reload", action="store_true")
    server.add_argument("--debug", action="store_true")

    admin = parser.add_argument_group("configuration and schema")
    admin.add_argument("--list-envs", action="store_true", help="List the .env.<name> files found")
    admin.add_argument("--validate-env", metavar="ENV", help="Check that an environment file loads")
    admin.add_argument("--create-sample", metavar="ENV", help="Write .env.<ENV>.sample")
    admin.add_argument("--migrate", action="store_true", help="Apply Alembic migrations and exit")
    return parser


def run_admin_command(args) -> bool:
    """Handle the one-shot commands. Returns True when one ran."""
    from trekhub.config.loader import ConfigLoader

    if args.list_envs:
        names = ConfigLoader.get_available_environments()
        print("Available environment configurations:")
        for name in names or ["(none)"]:
            print(f"  - {name}")
        return True

    if args.validate_env:
        if not ConfigLoader.validate_environment_config(args.validate_env):
            print(f"✗ Environment '{args.validate_env}' configuration is invalid or missing")
            sys.exit(1)
        print(f"✓ Environment '{args.validate_env}' configuration is valid")
        return True

    if args.create_sample:
        try:
            path = ConfigLoader.create_sample_env_file(args.create_sample)
        except (OSError, ValueError) as e:
            print(f"✗ Failed to create sample configuration: {e}")
            sys.exit(1)
        print(f"✓ Sample configuration created: {path}")
        return True

    if args.migrate:
        from alembic import command
        from alembic.config import Config

        command.upgrade(Config("alembic.ini"), "head")
        print("✓ Database schema is up to date")
        return True

    return False


def serve(args) -> None:
    from trekhub.config.loader import load_config_for_environment

    try:
        settings = load_config_for_environment(args.env)
    except ValueError as e:
        print(f"✗ Failed to load configuration: {e}")
        sys.exit(1)

    host = args.host or settings.host
    port = args.port or settings.port
    reload = args.reload or settings.reload
    workers = 1 if reload else (args.workers or settings.workers)

    # Workers import trekhub.main and read their settings from the environment
    os.environ["ENVIRONMENT"] = settings.environment.value
    if args.debug:
        os.environ["DEBUG"] = "true"

    print(f"🚀 Starting {settings.app_name} v{settings.app_version} "
          f"({settings.environment.value}) on {host}:{port}, workers={workers}, reload={reload}")

    import uvicorn

    uvicorn.run(
        "trekhub.main:app",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=settings.log_level.value.lower(),
        access_log=False,  # RequestContextMiddleware logs each request
    )


def main():
    args = build_parser().parse_args()
    # trekhub.config.settings picks its .env.<name> file when first imported
    if args.env:
        os.environ["ENVIRONMENT"] = args.env
    if not run_admin_command(args):
        serve(args)


if __name__ == "__main__":
    main()
