import asyncio
import sys
import logging
import click
from dotenv import load_dotenv
from pydantic import ValidationError

from src.config import Settings
from src.infrastructure.api_client import DirectoryApiClient
from src.infrastructure.favorite_store import SqlFavoriteStore
from src.application.favorites import FavoriteService
from src.application.directory_service import DirectoryService
from src.domain.models import LANGUAGES, ALL_LANGUAGES
from src.domain.exceptions import FavoriteStoreException
from src.presentation.formatting import render_project

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ],
        force=True,
    )


def build_service(settings: Settings) -> DirectoryService:
    try:
        store = SqlFavoriteStore(db_url=settings.favorites_db_url)
        favorite_service = FavoriteService(store)
    except FavoriteStoreException as e:
        logger.error(f"Favorite store unavailable: {e}")
        sys.exit(1)

    api_client = DirectoryApiClient(base_url=settings.api_url, timeout_seconds=settings.request_timeout)
    return DirectoryService(api_client=api_client, favorite_service=favorite_service)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, verbose):
    """Browse, filter and bookmark open-source projects from the directory API."""
    # Load environment variables from .env file
    load_dotenv()
    try:
        settings = Settings.from_env()
    except ValidationError as e:
        configure_logging("INFO")
        logger.error(f"Invalid configuration in the environment: {e}")
        sys.exit(1)
    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


@cli.command()
@click.option('--language', default=ALL_LANGUAGES, type=click.Choice(LANGUAGES), help='Only projects using this language')
@click.option('--tag', 'tags', multiple=True, help='Only projects with an issue carrying this label (repeatable)')
@click.option('--search', default='', help='Case-insensitive substring of the project name')
@click.option('--issue-search', default='', help='Case-insensitive substring of an issue title')
@click.option('--sort', 'sort_field', default='stars', type=click.Choice(['stars', 'activity']))
@click.option('--direction', default=None, type=click.Choice(['desc', 'asc', 'recent', 'oldest']),
              help='desc/asc for stars, recent/oldest for activity')
@click.option('--page', default=1, type=click.IntRange(min=1))
@click.option('--page-size', default=None, type=click.IntRange(min=1))
@click.option('--issues', 'show_issues', is_flag=True, help='Show the first issues of each project')
@click.pass_obj
def browse(settings, language, tags, search, issue_search, sort_field, direction, page, page_size, show_issues):
    """Fetch the directory and print one page of projects."""
    service = build_service(settings)
    try:
        service.select_language(language)
        for tag in set(tags):
            service.toggle_tag(tag)
        service.search_repos(search)
        service.search_issues(issue_search)
        service.sort_by(sort_field, direction)
        service.set_page_size(page_size or settings.page_size)
        service.go_to_page(page)
    except ValidationError as e:
        raise click.BadParameter(str(e))

    asyncio.run(service.load())
    if service.error:
        click.echo(service.error, err=True)
        sys.exit(1)

    view = service.view()
    if not view.page_items:
        click.echo("No projects match the current filters.")
    for project in view.page_items:
        is_favorite = service.favorite_service.is_favorite(project.name)
        for line in render_project(project, is_favorite=is_favorite, show_issues=show_issues):
            click.echo(line)
    click.echo(f"Page {view.page} of {view.total_pages} ({view.total_items} projects)")


@cli.command()
@click.argument('name')
@click.pass_obj
def favorite(settings, name):
    """Add NAME to favorites, or remove it if it already is one."""
    service = build_service(settings)
    try:
        service.toggle_favorite(name)
    except FavoriteStoreException as e:
        logger.error(f"Could not update favorites: {e}")
        sys.exit(1)
    state = "added to" if service.favorite_service.is_favorite(name) else "removed from"
    click.echo(f"'{name}' {state} favorites.")


@cli.command()
@click.pass_obj
def favorites(settings):
    """List favorite projects."""
    service = build_service(settings)
    names = sorted(service.favorite_service.favorites)
    if not names:
        click.echo("No favorites yet.")
    for name in names:
        click.echo(name)


@cli.command()
@click.argument('url')
@click.pass_obj
def submit(settings, url):
    """Submit a repository URL for inclusion in the directory."""
    service = build_service(settings)
    result = asyncio.run(service.submit_repository(url))
    click.echo(result.message)
    if not result.success:
        sys.exit(1)


if __name__ == "__main__":
    cli()
