import click

from .config_loader import load_settings
from .logging_setup import setup_logging
from .mongo_client import get_client, get_db, ping, verify_schema
from .schema import COLLECTIONS, plan_requests


@click.group()
def cli():
    pass


@cli.group(help="Initialize external resources.")
def bootstrap():
    """Initialize external resources."""
    pass


@bootstrap.command()
@click.option("--config", default="config.yaml", show_default=True)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Log the planned requests without connecting to MongoDB.",
)
@click.option(
    "--skip-existing",
    is_flag=True,
    help="Skip an existing app user and existing collections instead of failing.",
)
def mongo(config, dry_run, skip_existing):
    log = setup_logging()
    s = load_settings(config)

    if dry_run:
        for i, req in enumerate(plan_requests(s.app, s.mongo.auth_source), start=1):
            log.info("planned request", extra={"stage": "bootstrap.mongo", "step": i, "request": req})
        return

    client = None
    try:
        from .bootstrap.mongo_bootstrap import bootstrap_mongo

        client = get_client(s)
        ping(client)
        res = bootstrap_mongo(s, client, skip_existing=skip_existing)
        log.info("mongo bootstrap complete", extra={"stage": "bootstrap.mongo", **res})
    except Exception:
        log.warning(
            "bootstrap mongo failed",
            extra={"stage": "bootstrap.mongo", "database": s.app.database},
            exc_info=True,
        )
        raise
    finally:
        if client is not None:
            client.close()


@cli.command(help="Check the app database's collections and indexes.")
@click.option("--config", default="config.yaml", show_default=True)
def verify(config):
    log = setup_logging()
    s = load_settings(config)
    client = get_client(s)
    try:
        problems = verify_schema(get_db(client, s), COLLECTIONS)
    finally:
        client.close()

    for problem in problems:
        log.warning("schema mismatch", extra={"stage": "verify", "problem": problem})
    if problems:
        raise click.ClickException(f"{len(problems)} schema problem(s) in {s.app.database}")
    log.info("schema verified", extra={"stage": "verify", "database": s.app.database})


def main():
    cli()


if __name__ == "__main__":
    main()
