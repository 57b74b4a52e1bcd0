"""pomgate - effective Maven POM dependency resolver.

    Returns:
        int: Exit code
"""
import csv
import io
import json
import logging
import sys

from constants import ExitCodes, OutputFormats
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from cli_config import ConfigError, build_settings
from args import parse_args
from pom.errors import CyclicManifestError, ErrorKind, MalformedManifestError, PomError
from pom.parser import Parser

logger = logging.getLogger(__name__)


def _infer_format(args) -> str:
    if getattr(args, "OUTPUT_FORMAT", None):
        return args.OUTPUT_FORMAT
    output = getattr(args, "OUTPUT", None)
    if output and output.lower().endswith(".csv"):
        return OutputFormats.CSV.value
    return OutputFormats.JSON.value


def render_json(libraries) -> str:
    """Render libraries as a JSON array of {name, version} objects."""
    return json.dumps([lib.to_dict() for lib in libraries], ensure_ascii=False, indent=4)


def render_csv(libraries) -> str:
    """Render libraries as CSV with a ``name,version`` header."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["name", "version"])
    for lib in libraries:
        writer.writerow([lib.name, lib.version])
    return buffer.getvalue()


def export(libraries, fmt: str, path=None) -> None:
    """Write rendered libraries to ``path``, or stdout when no path is given."""
    text = render_csv(libraries) if fmt == OutputFormats.CSV.value else render_json(libraries)
    if not path:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        return
    with open(path, "w", encoding="utf-8", newline="") as file:
        file.write(text)
    logging.info("%s file has been successfully exported at: %s", fmt.upper(), path)


def _setup_logging(args) -> None:
    level = "ERROR" if getattr(args, "QUIET", False) else str(args.LOG_LEVEL).upper()
    configure_logging(level)
    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logging.getLogger().addHandler(handler)


def run(argv=None) -> int:
    """Run the CLI and return an exit code instead of exiting."""
    args = parse_args(argv)
    _setup_logging(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        settings = build_settings(args)
    except ConfigError as e:
        logging.error("%s", e)
        return ExitCodes.FILE_ERROR.value

    parser = Parser(
        args.POM_FILE,
        local_repository=settings.local_repository,
        remote_repositories=settings.remote_repositories,
        verify_dependencies=settings.verify_dependencies,
        excluded_scopes=settings.excluded_scopes,
        strict_properties=settings.strict_properties,
    )
    try:
        libraries = parser.parse_file()
    except FileNotFoundError as e:
        logging.error("%s: %s", ErrorKind.PATH_NOT_FOUND.value, e)
        return ExitCodes.FILE_ERROR.value
    except OSError as e:
        logging.error("%s", e)
        return ExitCodes.FILE_ERROR.value
    except CyclicManifestError as e:
        logging.error("%s: %s", e.kind.value, e)
        return ExitCodes.RESOLUTION_ERROR.value
    except MalformedManifestError as e:
        logging.error("%s: %s", e.kind.value, e)
        return ExitCodes.FILE_ERROR.value
    except PomError as e:
        logging.error("%s: %s", e.kind.value, e)
        return ExitCodes.RESOLUTION_ERROR.value

    try:
        export(libraries, _infer_format(args), getattr(args, "OUTPUT", None))
    except OSError as e:
        logging.error("Output couldn't be written to disk: %s", e)
        return ExitCodes.FILE_ERROR.value
    return ExitCodes.SUCCESS.value


def main():
    """Main function of the program."""
    sys.exit(run())


if __name__ == "__main__":
    main()
