"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    RESOLUTION_ERROR = 2


class OutputFormats(Enum):
    """Export formats supported by the CLI.

    Args:
        Enum (string): Export formats supported by the CLI.
    """

    JSON = "json"
    CSV = "csv"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_MAVEN_CENTRAL = "https://repo.maven.apache.org/maven2"
    POM_XML_FILE = "pom.xml"
    POM_EXTENSION = ".pom"
    DEFAULT_RELATIVE_PATH = "../pom.xml"
    METADATA_FILES_LOCAL = ["maven-metadata-local.xml", "maven-metadata.xml"]
    METADATA_FILE_REMOTE = "maven-metadata.xml"
    DEFAULT_DEPENDENCY_TYPE = "jar"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests

    # Guards against malformed manifests that loop back on themselves
    MAX_PARENT_DEPTH = 32
    MAX_IMPORT_DEPTH = 32

    # Environment variables consulted by the CLI only
    ENV_LOG_LEVEL = "POMGATE_LOG_LEVEL"
    ENV_LOCAL_REPOSITORY = "POMGATE_LOCAL_REPOSITORY"
    DEFAULT_LOCAL_REPOSITORY = "~/.m2/repository"
    SUPPORTED_FORMATS = [OutputFormats.JSON.value, OutputFormats.CSV.value]
