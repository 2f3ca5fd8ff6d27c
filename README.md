# layerdive

`layerdive` models the layers of a container image as file trees. It stacks
layers on top of each other the way an overlay filesystem does, marks what
each layer adds, changes or removes, and estimates how much space is wasted
by files that are stored more than once or deleted in a later layer.

It has no dependencies outside the standard library.

## File trees

A `FileTree` (in `layerdive.filetree.tree`) holds one layer. Paths are added
with `add_path`, which creates the intermediate directories and returns the
end node together with the nodes it created:

```python
from layerdive.filetree.file_info import FileInfo
from layerdive.filetree.render import tree_string
from layerdive.filetree.tree import FileTree

tree = FileTree()
tree.add_path("/etc/nginx/nginx.conf", FileInfo())
tree.add_path("/tmp/nonsense", FileInfo())
print(tree_string(tree, False), end="")
```

prints

```
├── etc
│   └── nginx
│       └── nginx.conf
└── tmp
    └── nonsense
```

Other operations on a tree:

- `get_node(path)` and `remove_path(path)`; both raise
  `layerdive.filetree.node.FileTreeError` for a path that does not exist.
- `copy()` makes a deep copy.
- `stack(upper)` applies another layer on top, deleting paths named by
  `.wh.` whiteout entries; opaque markers (`.wh..wh..opq`) are never added.
  It returns a list of `PathError` for paths that could not be applied.
- `compare_and_mark(upper)` annotates the tree with a `DiffType`
  (`UNMODIFIED`, `MODIFIED`, `ADDED`, `REMOVED`) for every node, relative to
  the layer above it.
- `visit_depth_child_first` and `visit_depth_parent_first` walk the tree in
  sorted name order, with an optional evaluator that decides which nodes are
  visited.

`stack_tree_range(trees, start, stop)` stacks a range of layers onto a copy of
the first one.

`FileInfo` (in `layerdive.filetree.file_info`) carries a file's type, link
target, content hash, size, mode and ownership. It can be built from a
`tarfile.TarInfo` with `file_info_from_tar` or from a file on disk with
`file_info_from_path`. Two `FileInfo` values compare as `MODIFIED` when their
type, content hash, mode, uid or gid differ.

## Rendering

`layerdive.filetree.render` draws trees as text:

- `tree_string(tree, show_attributes)` renders the whole tree;
  `tree_string_between(tree, start, stop, show_attributes)` renders only the
  rows `start` to `stop`.
- Collapsed directories (`node.data.view_info.collapsed`) are drawn with `⊕`
  and their contents are left out; hidden nodes are skipped.
- With `show_attributes`, each line is prefixed by `metadata_string(node)`:
  type, permission bits, `uid:gid` and size (a directory's size sums the files
  beneath it).
- `visible_size(tree)` counts the rows the tree takes up.
- `set_color_enabled(True)` colours names and attributes by diff type with
  ANSI escapes.

`set_default_collapse` in `layerdive.filetree.file_info` sets whether newly
created nodes start out collapsed.

## Efficiency

`layerdive.filetree.efficiency.efficiency(trees)` scores a list of layer
trees. For each path it compares the smallest size seen with the total size
spent on it over all layers; a whiteout counts the size of what it removed.
It returns the score (1.0 when nothing is wasted) and the `EfficiencyData` of
every path found in more than one layer, in ascending order of cumulative
size.

```python
from layerdive.filetree.efficiency import efficiency
from layerdive.filetree.file_info import FileInfo
from layerdive.filetree.tree import FileTree

trees = [FileTree(), FileTree(), FileTree()]
trees[0].add_path("/etc/nginx/nginx.conf", FileInfo(size=2000))
trees[0].add_path("/etc/nginx/public", FileInfo(size=3000))
trees[1].add_path("/etc/nginx/nginx.conf", FileInfo(size=5000))
trees[1].add_path("/etc/athing", FileInfo(size=10000))
trees[2].add_path("/etc/.wh.nginx", FileInfo(type_flag=1, hash=123))

score, wasted = efficiency(trees)
# score == 0.75
# wasted[0].path == "/etc/nginx/nginx.conf", wasted[0].cumulative_size == 7000
```

## Comparing ranges of layers

`layerdive.filetree.comparer.Comparer` builds and caches marked trees for a
range of bottom layers compared against a range of top layers, identified by
a `TreeIndexKey`. `natural_indexes()` yields the keys comparing each layer
with everything beneath it, `aggregated_indexes()` the keys comparing all
layers up to each one with the base layer, and `build_cache()` builds both
sets and returns the problems it met.

```python
from layerdive.filetree.comparer import Comparer, TreeIndexKey

comparer = Comparer(trees)
problems = comparer.build_cache()
marked = comparer.get_tree(TreeIndexKey(0, 0, 1, 2))
```

## Image sources and sizes

`layerdive.source` names where an image can come from: `parse_image_source`
maps `docker`, `podman`, `docker-archive` or `docker-tar` to an
`ImageSource`, and `derive_image_source` splits a reference with a scheme:

```python
from layerdive.source import ImageSource, derive_image_source

derive_image_source("docker-archive://image.tar")
# (ImageSource.DOCKER_ARCHIVE, "image.tar")
```

A reference that does not parse as a URL gives `(ImageSource.UNKNOWN, "")`;
`docker://alpine:latest` is one, since `:latest` reads as a port.

`layerdive.units` formats and parses byte sizes: `format_bytes(1154361)` gives
`"1.2 MB"` (base 1000), and `parse_bytes("50kB")` gives `50000`; `parse_bytes`
also understands binary units such as `MiB` and raises `ValueError` for sizes
it cannot read.

## What it does not do

`layerdive` works on trees that you build. It does not read image archives,
does not talk to the `docker` or `podman` clients, does not evaluate CI rules
or write analysis reports, and has no command line. The `layerdive.image` and
`layerdive.ci` sub-packages are present but hold no modules.