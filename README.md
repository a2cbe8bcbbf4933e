# aptshelf

A library for the parts of a Debian/Ubuntu package system that live in
plain files: the APT configuration file, `sources.list` entries, the APT
history log, and `.deb` archives. It also has data types for dependency
relations, broken-marking reasons and download progress.

## Installation

```
pip install aptshelf
```

To run the test suite:

```
pip install "aptshelf[test]"
pytest
```

## Modules

### `aptshelf.dependencyinfo`

- `parse_depends(field, dependency_type)` turns a `Depends:`-style field
  into a list of alternative ("or") groups. Each group is a list of
  `DependencyInfo` records.
- Parsing stops at the first malformed term and returns the groups read up
  to that point.
- Architecture qualifiers such as `[amd64]` are checked against the host
  architecture. `DEB_HOST_ARCH` is used if it is set, otherwise the machine
  type.
- Restriction lists such as `<!nocheck>` are checked against
  `DEB_BUILD_PROFILES`.
- A term that does not apply stays in its place with an empty package name.
- `DependencyInfo` is a frozen dataclass with these fields: `package_name`,
  `package_version`, `relation_type` (a `RelationType`), `dependency_type`
  (a `DependencyType`) and `multi_arch_annotation`.
- `DependencyInfo.create()` splits a `name:any`-style suffix off the name
  and stores it as the annotation.
- `type_name(dependency_type)` returns the field name of a type, for
  example `"Depends"` or `"PreDepends"`. It returns `""` for an unknown type.

### `aptshelf.markingerrorinfo`

`MarkingErrorInfo` is a frozen dataclass that pairs a `BrokenReason` with
the `DependencyInfo` it concerns.

### `aptshelf.downloadprogress`

`DownloadProgress` is the state of one file download:

- `uri`, `status` (a `DownloadStatus`), `short_description`, `file_size`,
  `fetched_size` and `status_message`.
- `progress()` returns a rounded percentage. A zero-size file counts as 100.
- `to_tuple()` and `from_tuple()` convert the record to and from a plain
  tuple, in a fixed field order.

### `aptshelf.config`

`Config(path="/etc/apt/apt.conf")` reads an `apt.conf`-style file of
`key "value";` lines.

- `read_entry(key, default)` converts the value to the type of `default`:
  bool, int or str. Keys are matched without regard to case. It returns
  `default` when the value is missing or cannot be converted.
- `write_entry(key, value)` updates or appends the line and writes the file
  at once.
- `save()` writes the file, and `buffer` holds its current text.
- `update_buffer_entry(buffer, key, value)` is the text-level edit that
  `write_entry()` uses.

### `aptshelf.sourceentry`

`SourceEntry.parse(line, file)` reads one `sources.list` line:

- the type (`deb`, `deb-src`, `rpm`, `rpm-src`)
- `[arch=...]` options
- the URI, distribution and components
- a trailing `#` comment
- whether the line is commented out.

Lines that cannot be read give an entry with `is_valid` set to false. Such
an entry is written back exactly as it was read.

Other methods:

- `to_string()` formats the entry as a line.
- `set_enabled()` comments the entry in or out.
- Two entries are equal when their enabled state, type, URI, distribution
  and components match.

### `aptshelf.sourceslist`

`SourcesList(source_files=None)` loads the given files. By default it loads
`/etc/apt/sources.list` and every `*.list` file in `/etc/apt/sources.list.d`.

- `entries()` and `add_entry()` read and add entries. `add_entry()` skips
  duplicates.
- `remove_entry()`, `contains_entry()` and `source_files()` remove, look up
  and list.
- `data_for_source_file()` and `to_string()` give the text that would be
  written.
- `reload()` reads the files again and `save()` writes them back. Files that
  cannot be read or written are logged as warnings.

### `aptshelf.history`

- `parse_history(text)` splits history log text into stanzas and returns
  the valid `HistoryItem`s.
- A `HistoryItem` holds:
  - `start_date`
  - the installed, upgraded, downgraded, removed and purged package lists,
    with architecture suffixes removed
  - `error`
  - `is_valid`.
- `HistoryItem.parse()` reads a single stanza.
- `History(history_file="/var/log/apt/history.log")` reads every file in
  that file's directory whose path contains "history", in name order.
  Gzip-compressed rotations are included.
- `items()` returns the items and `reload()` reads the logs again.

### `aptshelf.debfile`

`DebFile(path)` opens a `.deb` archive. The archive members may be gzip,
bzip2, xz/lzma, zstd or uncompressed tar. If the archive or its control
file cannot be read, `is_valid` is false.

Control fields:

- `control_field(name)`, with the name matched without regard to case.
- Properties: `package_name`, `source_package`, `version`, `architecture`,
  `maintainer`, `section`, `priority`, `homepage`.
- `short_description()` and `long_description()`.
- `installed_size()`, which returns 0 when the field is missing or not a
  number.
- Dependency fields as or-groups: `depends()`, `pre_depends()`,
  `suggests()`, `recommends()`, `conflicts()`, `replaces()`,
  `obsoletes()`, `breaks()`, `enhances()`.

Contents:

- `md5_sum()` returns the hex MD5 digest of the archive file.
- `file_list()` lists the data files, leaving out the directories that
  only contain other entries.
- `icon_list()` picks the paths under `./usr/share/icons`, or under
  `./usr/share/pixmaps` when there are none.
- `extract_archive(directory=None)` unpacks the data files. It returns
  `True` or `False`.
- `extract_file_from_archive(file_name, destination)` unpacks a single file
  or directory. It returns `True` or `False`.
- `DebFileError` is raised internally for unreadable archives.

## Example

```python
from aptshelf.sourceentry import SourceEntry
from aptshelf.dependencyinfo import DependencyType, parse_depends

entry = SourceEntry.parse("deb [arch=amd64] http://deb.example.com/debian stable main contrib", "")
print(entry.dist, entry.components)   # stable ['main', 'contrib']
entry.set_enabled(False)
print(entry.to_string())              # # deb [arch=amd64] http://deb.example.com/debian stable main contrib

for group in parse_depends("libc6 (>= 2.34), foo | bar", DependencyType.DEPENDS):
    print([dep.package_name for dep in group])
```

## What it does not do

- There is no package cache, dependency resolver, or marking, installing or
  removing of packages.
- `MarkingErrorInfo` and `DownloadProgress` are plain records. Nothing in
  the package produces them or downloads anything.
- `Config` and `SourcesList` write files directly. Writing to `/etc/apt`
  needs the permissions to do so, and there is no privileged helper.
- `Config` reads only flat `key "value";` lines from one file. It does not
  read `apt.conf.d`, nested `{ }` scopes or APT's built-in defaults.
- There is no command-line program.