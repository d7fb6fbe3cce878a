"""Version information for l10n-extractor."""

__version__ = "0.4.0"
__author__ = "l10n-extractor contributors"
__description__ = "Extract hardcoded UI strings from Flutter projects and rewrite them as localization lookups"

# Changelog:
# 0.4.0 - Rewrite pipeline hardening
#       - Records are relocated by value within two lines before rewriting
#       - Content drift skips a single record instead of failing the file
#       - Overlapping edits abort the file with OverlappingEditsError
#       - Optional removal of `const` around replaced literals
#       - `part of` files never receive an import
#       - Atomic file writes (temp file + os.replace)
#       - `restore` command for backups made by `rewrite`
#
# 0.3.0 - Context classification
#       - Widget and parameter role tables shared with the literal filter
#       - Text wrappers inherit the role of the enclosing widget
#       - Screen grouping from class names, file names and path words
#       - Advisory confidence score, `--min-confidence` for rewrite
#
# 0.2.0 - Structural extraction
#       - Dart parser producing an arena syntax tree with byte offsets
#       - Adjacent string literals merged into one candidate
#       - Interpolated strings reported and skipped
#       - Already-localized detection through accessor markers
#
# 0.1.0 - Initial release
#       - Literal filter (debug context, identifiers, URLs, date formats,
#         colors, measurements, configuration values)
#       - `init` and `extract` commands, JSON and console reports
