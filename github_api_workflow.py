"""
Provision a starter repository directly with a personal access token.

Usage: GITHUB_TOKEN=... python github_api_workflow.py <framework> <language>
"""
import asyncio
import logging
import os
import sys

from errors import AuthError, InvalidSelectionError, ProvisioningError
from models import Framework, Language, Selection
from provisioning import provision

logger = logging.getLogger(__name__)


def parse_selection(args):
    if len(args) != 2:
        raise InvalidSelectionError("Usage: github_api_workflow.py <framework> <language>")
    try:
        return Selection(framework=Framework(args[0]), language=Language(args[1]))
    except ValueError as e:
        raise InvalidSelectionError(
            f"Unknown selection {args[0]}/{args[1]}; frameworks: "
            f"{', '.join(f.value for f in Framework)}; languages: {', '.join(lang.value for lang in Language)}"
        ) from e


# Main workflow
def main(argv=None):
    logging.basicConfig(level=logging.INFO)
    args = sys.argv[1:] if argv is None else argv
    token = os.getenv('GITHUB_TOKEN')
    try:
        if not token:
            raise AuthError("GITHUB_TOKEN is not set")
        selection = parse_selection(args)
        repository_url = asyncio.run(provision(selection, token))
    except ProvisioningError as e:
        logger.error(f"Provisioning failed: {e.message}")
        print(e.message, file=sys.stderr)
        return 1

    print(repository_url)
    return 0


if __name__ == '__main__':
    sys.exit(main())
