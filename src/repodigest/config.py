# src/repodigest/config.py
from repodigest.core.rules import Rule

MAX_FILE_SIZE_BYTES = 50 * 1024
TOP_FILES_CAPACITY = 20
DEFAULT_MAX_TOKENS_PER_BATCH = 12000
CACHE_TTL_SECONDS = 600
ANALYSIS_CONCURRENCY = 3
DEFAULT_TREE_DEPTH = 4
DEFAULT_IGNORE_FILE = ".digestignore"

# Scoring constants: priority files dominate, shallow beats deep,
# bigger files win slightly among the rest.
PRIORITY_BONUS = 100.0
DEPTH_PENALTY = 1.0
TOKENS_PER_POINT = 100.0

# "" admits files without an extension (Makefile, LICENSE, ...)
DEFAULT_ALLOWED_EXTENSIONS = frozenset({
    ".js", ".ts", ".jsx", ".tsx",
    ".py", ".go", ".java", ".rb",
    ".php", ".cpp", ".c", ".cs",
    ".swift", ".kt", ".rs",
    ".json", ".yml", ".yaml",
    ".sql", ".env", "",
})

DEFAULT_PRIORITY_NAMES = (
    Rule.literal("app.js"), Rule.literal("main.js"),
    Rule.literal("index.js"), Rule.literal("server.js"),
    Rule.literal("app.ts"), Rule.literal("main.ts"),
    Rule.literal("index.ts"), Rule.literal("server.ts"),
    Rule.literal("routes.js"), Rule.literal("routes.ts"),
    Rule.literal("config.js"), Rule.literal("config.ts"),
    Rule.literal("package.json"), Rule.literal("README.md"),
    Rule.literal("Dockerfile"),
    Rule.regex(r".*\.config\.js$"),
)

DEFAULT_SKIP_NAMES = (
    # Lock files
    Rule.literal("package-lock.json"),
    Rule.literal("yarn.lock"),
    Rule.literal("pnpm-lock.yaml"),

    # Environment files
    Rule.literal(".env"),
    Rule.literal(".env.local"),
    Rule.literal(".env.development"),
    Rule.literal(".env.production"),
    Rule.literal(".env.test"),

    # Logs, temp output, editor backups
    Rule.regex(r"^.*\.log$"),
    Rule.regex(r"^.*\.tmp$"),
    Rule.regex(r"^.*\.cache$"),
    Rule.regex(r"^.*~$"),

    # Minified assets, source maps
    Rule.regex(r"^.*\.min\.(js|css)$"),
    Rule.regex(r"^.*\.map$"),

    # Media, fonts, design files, office documents
    Rule.regex(r"^.*\.(png|jpg|jpeg|gif|webp|svg|bmp|ico)$"),
    Rule.regex(r"^.*\.(mp3|wav|ogg|flac|aac)$"),
    Rule.regex(r"^.*\.(mp4|webm|avi|mov|mkv)$"),
    Rule.regex(r"^.*\.(woff|woff2|ttf|otf|eot|ttc)$"),
    Rule.regex(r"^.*\.(pdf|ai|eps|sketch|psd|xd)$"),
    Rule.regex(r"^.*\.(doc|docx|ppt|pptx|xls|xlsx|csv)$"),

    # Prose other than READMEs, samples and examples
    Rule.regex(r"^((?!README).)*\.(md|markdown|rst|txt)$"),
    Rule.regex(r"^sample.*$"),
    Rule.regex(r"^demo.*$"),
    Rule.regex(r"^test-data.*$"),
    Rule.regex(r"^.*\.example$"),

    # OS and editor junk
    Rule.literal(".DS_Store"),
    Rule.literal("Thumbs.db"),
    Rule.glob("*.swp"),
    Rule.glob("*.swo"),
    Rule.glob("*.bak"),
    Rule.glob("*.iml"),

    # Hidden dotfiles
    Rule.regex(r"^\.(?!README).*$"),
    Rule.literal(".gitignore"),
)

DEFAULT_SKIP_DIRS = (
    Rule.literal("node_modules"),
    Rule.literal(".git"),
    Rule.literal("dist"),
    Rule.literal("build"),
    Rule.literal("coverage"),
    Rule.regex(r"^\."),
)

# Names hidden from the display tree.
TREE_IGNORED_NAMES = frozenset({
    ".git", ".gitignore", "node_modules", "dist", "build", ".env",
    "package-lock.json", "yarn.lock", "__tests__", ".DS_Store", "coverage",
})
TREE_IGNORED_SUFFIXES = (".test.js", ".spec.js")
