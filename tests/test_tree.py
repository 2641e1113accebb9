# tests/test_tree.py
from repodigest.core.languages import detect_languages
from repodigest.core.tree import TreeNode, build_file_tree, render_file_tree


def _names(nodes):
    return [n.name for n in nodes]


def test_build_file_tree_hides_ignored_names(sample_repo):
    (sample_repo / "src" / "app.test.js").write_text("test()", encoding="utf-8")
    nodes = build_file_tree(sample_repo)

    assert "node_modules" not in _names(nodes)
    assert ".git" not in _names(nodes)
    assert ".env" not in _names(nodes)
    assert "yarn.lock" not in _names(nodes)

    src = next(n for n in nodes if n.name == "src")
    assert src.kind == "folder"
    assert src.depth == 0
    assert "app.test.js" not in _names(src.children)
    assert "app.js" in _names(src.children)


def test_build_file_tree_depth_limit(sample_repo):
    nodes = build_file_tree(sample_repo, max_depth=1)
    src = next(n for n in nodes if n.name == "src")
    utils = next(n for n in src.children if n.name == "utils")

    assert utils.depth == 1
    assert utils.children == []


def test_build_file_tree_missing_dir(tmp_path):
    assert build_file_tree(tmp_path / "missing") == []


def test_render_file_tree(tmp_path):
    nodes = [
        TreeNode("README.md", "file", tmp_path / "README.md", 0),
        TreeNode("src", "folder", tmp_path / "src", 0, children=[
            TreeNode("main.py", "file", tmp_path / "src" / "main.py", 1),
            TreeNode("utils", "folder", tmp_path / "src" / "utils", 1, children=[
                TreeNode("helper.py", "file", tmp_path / "src" / "utils" / "helper.py", 2),
            ]),
        ]),
    ]

    assert render_file_tree(nodes, "my_project").splitlines() == [
        "my_project/",
        "├── README.md",
        "└── src/",
        "    ├── main.py",
        "    └── utils/",
        "        └── helper.py",
    ]


def test_render_unexpanded_folder(sample_repo):
    rendered = render_file_tree(build_file_tree(sample_repo, max_depth=0), "project")

    assert "└── src/" in rendered
    assert "app.js" not in rendered


def test_detect_languages(sample_repo):
    languages = detect_languages(build_file_tree(sample_repo))

    assert "JavaScript" in languages
    assert "JSON" in languages
    assert "Markdown" in languages
    assert len(languages) == len(set(languages))
