# papermap

`papermap` loads a citation graph of papers and turns it into layout
graphs for drawing a two-dimensional map. Papers are linked by their
references, the finest layout is coarsened into a hierarchy of smaller
layouts, and spring forces along the links can be computed for a
force-directed simulation.

## Installing

```
pip install .
```

The package uses only the standard library. For the tests:

```
pip install ".[test]"
pytest
```

## What it contains

- `papermap.common` – the `Paper` record; `date_to_unique_id` and
  `unique_id_to_date` convert between dates and 32-bit time-ordered ids;
  `build_citation_links` fills each paper's `cites` from the others'
  `refs`; `recompute_num_graph_cites` counts citations among included
  papers through references with non-zero frequency; `recompute_colours`
  colours the connected components of the included papers and returns
  how many there are (with `verbose=True` it prints a histogram of
  component sizes).
- `papermap.category` – `CategorySet` and `CategoryInfo`. Id 0 is always
  the `"unknown"` category; `add_category(name, rgb)` adds up to 256
  categories in all and raises `CategoryError` on a duplicate name or
  when the set is full. Look categories up with `get_by_id` and
  `get_by_name`.
- `papermap.initconfig` – `load_init_config(path)` reads a settings file
  holding one JSON object, and `parse_init_config(data)` does the same
  from a decoded object. The result is an `InitConfig` with `nbody`
  (`NbodyConfig`, `ForcesConfig`, `MapOrientationConfig`), `tiles`
  (`TilesConfig`) and `sql` (`SqlConfig`, `MetaTableConfig`,
  `RefsTableConfig`, `MapTableConfig`) sections, each with defaults. A
  `description` string is required; malformed input raises
  `ConfigError`.
- `papermap.jsonio` – `load_categories(path)` and
  `load_papers(path, category_set)`; `iter_json_objects(text)` yields
  each value of a stream of whitespace-separated JSON values. Malformed
  input raises `JsonFormatError`.
- `papermap.otherlinks` – `load_other_links(path, papers)` merges extra
  weighted links into papers already loaded (sorted by id), rebuilds
  citations, and returns `(total links, new links)`.
- `papermap.layout` – `Layout`, `LayoutNode`, `LayoutLink` and
  `NodeFlag`. Layouts support lookup by paper id (`get_node_by_id`) or
  position (`get_node_at`), `rotate_all`, `propagate_positions_to_children`,
  `combine_duplicate_links`, `recompute_mass_radius` and a one-line
  `describe()`. Nodes support `compute_best_start_position`, and
  `export_quantities` / `import_quantities` for positions scaled by 20 to
  integers.
- `papermap.layoutbuild` – `build_from_papers(papers, age_weaken,
  factor_ref_link, factor_other_link)` builds the finest layout; a
  reference link weighs `factor_ref_link * ref_freq**2` (optionally
  weakened by the id difference) plus `factor_other_link` times any
  other weight, and fake links weigh 0.25.
- `papermap.coarsen` – `build_reduced(layout)` pairs each node with its
  most strongly linked free neighbour to make the next coarser layout.
- `papermap.force` – `ForceParams` and
  `compute_attractive_link_force(params, layout)`, which adds spring
  forces along every link to the nodes' `fx` and `fy`.

## Input files

A categories file holds one object with a `cats` array of
`{"cat": name, "col": [r, g, b]}` entries. A references file is a stream
of objects with `id`, `allcats` (comma-separated category names; at most
four are kept) and `refs` (a list of `[ref_id, ref_freq]` pairs; the
frequency is capped at 255 and self-references are dropped). An
other-links file is a stream of objects with `id` and `refs` as a list of
`[id, weight]` pairs.

## Example

```python
from papermap.jsonio import load_categories, load_papers
from papermap.common import recompute_colours
from papermap.layoutbuild import build_from_papers
from papermap.coarsen import build_reduced
from papermap.force import ForceParams, compute_attractive_link_force

categories = load_categories("categories.json")
papers = load_papers("references.json", categories)

for paper in papers:
    paper.included = True
recompute_colours(papers, verbose=True)

fine = build_from_papers(papers, False, 1.0, 0.0)
coarse = build_reduced(fine)
print(fine.describe())
print(coarse.describe())

for node in fine.nodes:
    node.compute_best_start_position()
compute_attractive_link_force(ForceParams(), fine)
```

## What it does not do

`papermap` is a library for loading the graph and working on its
layouts; it has no command to run. It computes only the attractive
spring forces along links: there is no repulsive force between nodes
and no iteration loop that moves nodes, so a complete map layout is not
produced by the package alone. It does not read papers from or write
positions to a database (the `sql` settings are parsed but not used),
does not write layouts to JSON, and draws nothing – there is no viewer
or image output.