from dupescan.core.comparators import default_registry

COMPARATOR_CHOICES = default_registry().names()

COMPARATOR_HELP_TEXT = (
    "Comparator deciding when two files are identical (repeatable):\n"
    "  exact : Byte-for-byte identical content (default)\n"
    "  json  : .json files with the same document after canonicalisation\n"
    "          (key order and whitespace ignored)\n"
    "Example : %(prog)s ~/data -c exact -c json\n"
)

EPILOG_TEXT = """
Examples:
  Basic usage - list duplicates in Downloads folder
  %(prog)s ~/Downloads

  Several roots, only files of at least 500KB, with sizes
  %(prog)s ~/Downloads ~/Backup -m 500KB -S

  Top level only, include empty files
  %(prog)s ~/Downloads -n -0

  Choose which files to preserve, group by group
  %(prog)s ~/Downloads -p

  Keep one file per group and move the rest to trash (with confirmation prompt)
  %(prog)s ~/Downloads --keep-one

  Same as above but without confirmation and with output to a file (for scripts)
  %(prog)s ~/Downloads --keep-one --force > ~/Downloads/report.txt
"""
