"""Constants used throughout gitcas."""

# Directory names
GIT_DIR = ".git"
OBJECTS_DIR = "objects"
REFS_DIR = "refs"

# File names
HEAD_FILE = "HEAD"
DEFAULT_HEAD_REF = "ref: refs/heads/main\n"

# Tree entry modes
MODE_FILE = "100644"
MODE_DIRECTORY = "40000"

# Hash algorithm
HASH_ALGORITHM = "sha1"
HASH_LENGTH = 40  # SHA-1 produces 40 hex characters
HASH_RAW_LENGTH = 20

# zlib level used for new objects; reads accept any level
DEFAULT_COMPRESSION_LEVEL = 6

# Well-known id of the tree with an empty payload ("tree 0\0")
EMPTY_TREE_ID = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

# Identity used when neither GIT_* nor USER/USERNAME is set
DEFAULT_USER_NAME = "unknown"

# Exit codes
EXIT_USER_ERROR = 1
EXIT_SYSTEM_ERROR = 2
EXIT_DATA_ERROR = 3
