# polarysdb

An embedded key/value store that keeps its data in named tables and writes
everything to a single AES-GCM encrypted file. Every change rewrites the
whole file, and a background thread polls the file every three seconds and
reloads it when another process has modified it.

## Installation

```
pip install polarysdb
```

## Usage

```python
from polarysdb.common import string_to_key
from polarysdb.database import init_database, DatabaseError

key = string_to_key("placeholder")
db = init_database(key, ".myapp")   # file: ~/.myapp/state/state.rdb

db.create("users")
db.write("users", "alice", {"email": "alice@example.com", "age": 30})

print(db.read("users", "alice"))    # {'email': 'alice@example.com', 'age': 30}
print(db.read_batch("users"))       # every value stored in the table
print(db.exists("orders"))          # False

try:
    db.read("users", "bob")
except KeyError:
    print("no such record")

db.delete("users", "alice")

try:
    db.write("orders", "1", {})
except DatabaseError as exc:
    print(exc)                      # table orders does not exist

db.close()
```

`Database` is also a context manager; leaving the `with` block stops the
file watcher. To choose the file location yourself, construct it directly:

```python
from polarysdb.database import Database

with Database(key, "/tmp/app/state.rdb", watch=False) as db:
    db.create("settings")
```

The constructor takes keyword options `logger` (a `Logger`), `watch`
(start the reload thread, default `True`) and `watch_interval` (seconds
between polls, default `3.0`). The parent directory of the path must exist.

Values must be JSON-serialisable. `read` raises `KeyError` when the table or
the key is missing; `write`, `delete` and `read_batch` raise `DatabaseError`
when the table does not exist. Deleting a missing key is not an error.

### Keys

`polarysdb.common.Key` is a 32-byte AES-256 key. Build one with
`bytes_to_key`, `string_to_key` or `hex_to_key`; shorter input is
left-padded with zero bytes and longer input keeps only its last 32 bytes.
`string_to_key` and `hex_to_key` drop a leading `0x` and use the UTF-8 bytes
of the remaining text (the characters are not hex-decoded). `Key.hex()` gives
the `0x`-prefixed hexadecimal form, `bytes(key)` the raw bytes, and keys
compare equal to keys or byte strings with the same content. `is_equal(a, b)`
compares two byte sequences.

### Export and import

All export and import operations require the database's current key and
raise `DatabaseError` otherwise:

- `export(key, path)` writes the tables as indented, unencrypted JSON.
- `import_data(key, path)` replaces the contents from such a file and saves.
- `export_encrypted(key, path)` / `import_encrypted(key, path)` do the same
  with a file encrypted under the database key.
- `change_key(old_key, new_key)` re-encrypts the database under a new key.

Imported files must hold a JSON object of tables; an empty table name or a
`null` table is rejected. Exported files are created with mode `0600`.

### Lower-level pieces

- `polarysdb.crypto.encrypt` / `decrypt` — AES-GCM with a random 12-byte
  nonce prepended to the ciphertext; `DecryptionError` on short or
  tampered input.
- `polarysdb.config.get_state_db_path(directory)` — returns
  `~/<directory>/state/state.rdb`, creating the folder.
- `polarysdb.logger.Logger` — a small levelled logger configured with
  `LoggerConfig` (`log_file_path`, `min_level`, `to_console`, `to_file`) and
  `Level`. Info and warnings go to stdout, errors to stderr; `fatal` logs and
  raises `SystemExit(1)`.

## What it does not do

There is no command-line tool and no network server; the store is used as a
library from one process, with other processes seen only through the shared
file. The package has no function to generate keys: supply your own secret
material and turn it into a `Key` with the helpers above.

## Running the tests

```
pip install -e ".[test]"
pytest
```