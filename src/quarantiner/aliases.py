from quarantiner.core.models import DigestAlgorithm

ALGORITHM_ALIASES = {
    "md5": DigestAlgorithm.MD5,
    "sha1": DigestAlgorithm.SHA1,
    "sha256": DigestAlgorithm.SHA256,
    "xxh64": DigestAlgorithm.XXH64,
}

ALGORITHM_CHOICES = list(ALGORITHM_ALIASES.keys())

ALGORITHM_HELP_TEXT = (
    "Content digest used to detect duplicates:\n"
    + "".join(
        f"  {name:<7}: {algorithm.description}\n"
        for name, algorithm in ALGORITHM_ALIASES.items()
    )
    + "Example: %(prog)s -i ~/Downloads --algorithm md5"
)

EPILOG_TEXT = """
Examples:
  Move duplicates found in the current folder to ./duplicated
  %(prog)s

  Scan Downloads and all its subfolders, see what would be moved
  %(prog)s -i ~/Downloads -r --dry-run

  Same as above, but actually move duplicates to a folder on another disk
  %(prog)s -i ~/Downloads -r -o /mnt/backup/dupes

  Only images between 500KB and 10MB, hashed with 4 threads
  %(prog)s -i ~/Pictures -r -x .jpg .png -m 500KB -M 10MB -w 4
"""
