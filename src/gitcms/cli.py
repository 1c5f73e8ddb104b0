"""git-cms command line interface."""

import os
import sys
import argparse
from typing import List, Optional

from . import __version__
from .api import GatewayError, create_gateway
from .services import ContentBrowser, DraftWorkflow, PublishedBranch, VersionService
from .utils import Config, get_logger, setup_logging


logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog='git-cms',
        description='Git-backed content management',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  git-cms serve --port 8000                # Start the HTTP API
  git-cms check                            # Verify the token and repository
  git-cms ls posts                         # Merged listing of content/posts
  git-cms versions content/hello.md        # Versions of a file across branches
  git-cms publish 12                       # Merge PR #12 and delete its branch
        """
    )

    parser.add_argument('--version', action='version', version=f'git-cms {__version__}')
    parser.add_argument('--config', help='Path to YAML configuration file')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True)

    serve = subparsers.add_parser('serve', help='Run the HTTP API')
    serve.add_argument('--host', help='Bind address (default from config)')
    serve.add_argument('--port', type=int, help='Port (default from config)')
    serve.add_argument('--reload', action='store_true', help='Reload on code changes')

    subparsers.add_parser('check', help='Verify credentials and repository access')

    versions = subparsers.add_parser('versions', help='List versions of a file across branches')
    versions.add_argument('path', help='File path in the repository')

    ls = subparsers.add_parser('ls', help='List content merged across branches')
    ls.add_argument('path', nargs='?', default='', help='Path relative to the content root')

    publish = subparsers.add_parser('publish', help='Merge a pull request and delete its branch')
    publish.add_argument('number', type=int, help='Pull request number')
    publish.add_argument('--title', help='Merge commit title')
    publish.add_argument('--keep-branch', action='store_true', help='Do not delete the draft branch')

    return parser


def build_gateway(config: Config):
    """Validate the configuration and connect to the hosting provider.

    Raises:
        ValueError: If the provider, token or repository is missing
    """
    config.validate()
    return create_gateway(config.get_gateway_config())


def cmd_serve(args, config: Config) -> int:
    import uvicorn

    server = config.get_server_config()
    config.validate()
    if args.config:
        # The app factory runs in uvicorn and reads its config path from here
        os.environ['GIT_CMS_CONFIG'] = args.config
    uvicorn.run(
        'gitcms.server:create_app',
        factory=True,
        host=args.host or server.get('host', '127.0.0.1'),
        port=args.port or server.get('port', 8000),
        reload=args.reload
    )
    return 0


def cmd_check(args, config: Config) -> int:
    gateway = build_gateway(config)
    gateway.verify_authentication()

    print(f"Authenticated with {config.get('gateway.provider')}; "
          f"published branch: {gateway.get_default_branch()}")
    return 0


def cmd_versions(args, config: Config) -> int:
    gateway = build_gateway(config)
    service = VersionService(gateway, published=PublishedBranch(gateway, config.get_fallback_branch()))

    revisions = service.list_versions(args.path)
    if not revisions:
        print(f"No versions of {args.path} found")
        return 1

    for revision in revisions:
        marker = '*' if revision.is_published else ' '
        print(f"{marker} {revision.branch:<40} {revision.last_modified_at.isoformat():<26} "
              f"{revision.author_name:<20} {revision.commit_message.splitlines()[0]}")
    return 0


def cmd_ls(args, config: Config) -> int:
    gateway = build_gateway(config)
    browser = ContentBrowser(
        gateway,
        content_root=config.get_content_root(),
        published=PublishedBranch(gateway, config.get_fallback_branch())
    )

    for entry in browser.list_merged(args.path):
        name = f"{entry.name}/" if entry.is_dir else entry.name
        state = 'published' if entry.is_published else f'draft ({entry.branch})'
        print(f"{name:<50} {state}")
    return 0


def cmd_publish(args, config: Config) -> int:
    gateway = build_gateway(config)
    workflow = DraftWorkflow(
        gateway,
        published=PublishedBranch(gateway, config.get_fallback_branch()),
        branch_prefix=config.get_branch_prefix()
    )

    pull_request = next((pr for pr in workflow.list_pull_requests() if pr.number == args.number), None)
    if pull_request is None:
        print(f"Open pull request #{args.number} not found")
        return 1

    outcome = workflow.publish_and_cleanup(
        pull_request,
        commit_title=args.title,
        delete_branch=not args.keep_branch
    )
    if not outcome.merged:
        print(f"Failed to publish #{args.number}")
        return 1

    print(f"Published #{args.number}: {pull_request.title}")
    if not args.keep_branch and not outcome.branch_deleted:
        print(f"Warning: branch {outcome.branch} was not deleted")
    return 0


COMMANDS = {
    'serve': cmd_serve,
    'check': cmd_check,
    'versions': cmd_versions,
    'ls': cmd_ls,
    'publish': cmd_publish
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    config = Config(args.config)
    setup_logging(config.get_log_config(), console_level='DEBUG' if args.debug else 'WARNING')

    try:
        return COMMANDS[args.command](args, config)
    except ValueError as e:
        print(f"Configuration error: {e}")
        return 1
    except GatewayError as e:
        logger.error(f"Hosting provider error: {e}")
        if args.debug:
            raise
        return 1
    except KeyboardInterrupt:
        return 0


if __name__ == '__main__':
    sys.exit(main())
