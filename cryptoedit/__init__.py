"""
Cryptoedit edits GPG encrypted files in your $EDITOR.

The file is decrypted to a private temporary file, the editor is opened on it, and the result is
encrypted back to the original path only if the contents changed. The temporary file is deleted
when the editor exits. The gpg command is used to perform all encryption and decryption.

Edit a file encrypted with a passphrase:

\b
    $ cryptoedit --symmetric "notes.txt.gpg"

Edit a file encrypted for one or more recipients:

\b
    $ cryptoedit "secrets.json.asc" -r alice@example.invalid -r bob@example.invalid

Without any recipients, the file is encrypted for the email in your git configuration:

\b
    $ git config --get user.email
    alice@example.invalid
    $ cryptoedit "secrets.json.asc"

Paths that do not exist yet are created. Paths ending in '.asc' are written ASCII armoured.
"""

__version__ = '1.0.0'
