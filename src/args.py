"""Argument parsing functionality for pomgate."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="pomgate",
        description=(
            "pomgate - Resolve the effective dependency list of a Maven POM"
        ),
        add_help=True,
    )

    parser.add_argument("-f", "--file",
                        dest="POM_FILE",
                        help="Path to the root pom.xml (default: ./pom.xml)",
                        action="store", type=str,
                        default=Constants.POM_XML_FILE)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="YAML file with repository and resolution settings",
                        action="store", type=str)
    parser.add_argument("--local-repository",
                        dest="LOCAL_REPOSITORY",
                        help="Maven-layout directory searched before remote repositories",
                        action="store", type=str)
    parser.add_argument("--remote-repository",
                        dest="REMOTE_REPOSITORIES",
                        help="Remote repository base URL; repeat to try several in order",
                        action="append", type=str,
                        default=None)
    parser.add_argument("--offline",
                        dest="OFFLINE",
                        help="Disable remote repositories entirely.",
                        action="store_true")
    parser.add_argument("--no-verify",
                        dest="NO_VERIFY",
                        help="Do not look up resolved dependencies in the repositories.",
                        action="store_true")
    parser.add_argument("--exclude-scope",
                        dest="EXCLUDED_SCOPES",
                        help="Drop dependencies with this scope (repeatable), e.g. test",
                        action="append", type=str,
                        default=None)
    parser.add_argument("--strict-properties",
                        dest="STRICT_PROPERTIES",
                        help="Fail on unresolved ${...} placeholders instead of keeping them.",
                        action="store_true")

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output file (JSON or CSV); stdout when omitted",
                        action="store",
                        type=str)
    parser.add_argument("--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (json or csv). If not specified, inferred from --output extension; defaults to json.",
                        action="store",
                        type=str.lower,
                        choices=Constants.SUPPORTED_FORMATS)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Only log errors to the console.",
                        action="store_true")

    return parser.parse_args(argv)
