from codemedic_core.utils.code import in_excluded_dir, is_excluded, is_supported_file


def test_supported_extensions():
    for name in ("app.js", "app.ts", "App.jsx", "App.TSX", "index.html", "site.css"):
        assert is_supported_file(name) is True


def test_unsupported_extensions():
    for name in ("main.py", "README.md", "package.json", "logo.svg", "app.js.map"):
        assert is_supported_file(name) is False


def test_excluded_dirs_at_any_depth():
    assert in_excluded_dir("node_modules/react/index.js") is True
    assert in_excluded_dir("web/dist/bundle.js") is True
    assert in_excluded_dir("packages/ui/build/out.css") is True


def test_file_named_like_excluded_dir_is_kept():
    assert in_excluded_dir("src/build.js") is False
    assert in_excluded_dir("dist.js") is False


class TestIsExcluded:
    def test_glob_basename_match(self):
        assert is_excluded("static/vendor.min.js", ["*.min.js"]) is True

    def test_glob_full_path_match(self):
        assert is_excluded("src/generated/api.ts", ["src/generated/*.ts"]) is True

    def test_directory_prefix_at_root(self):
        assert is_excluded("vendor/lib.js", ["vendor/"]) is True

    def test_directory_prefix_nested(self):
        assert is_excluded("web/vendor/lib.js", ["vendor"]) is True

    def test_no_false_positive_on_similar_name(self):
        assert is_excluded("vendor_helpers.js", ["vendor/"]) is False

    def test_not_excluded_when_no_patterns(self):
        assert is_excluded("src/main.js", []) is False
