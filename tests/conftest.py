"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local phpsense package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of phpsense modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("phpsense"):
        del sys.modules[module_name]


@pytest.fixture(autouse=True)
def isolated_global_config(tmp_path_factory: pytest.TempPathFactory) -> Iterator[Path]:
    """Point the global config file somewhere empty so the developer's own config never leaks in."""
    path = tmp_path_factory.mktemp("global") / "config.yaml"
    with patch("phpsense.config.loader.GLOBAL_CONFIG_PATH", path):
        yield path


def _write_tree(root: Path, files: dict[str, str]) -> Path:
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    return root


@pytest.fixture
def write_tree() -> Callable[[Path, dict[str, str]], Path]:
    """Create files (relative path -> content) under a root directory."""
    return _write_tree


@pytest.fixture
def php_project(tmp_path: Path) -> Path:
    """A small PHP source tree with a namespace, inheritance and a free function."""
    return _write_tree(
        tmp_path / "src",
        {
            "App/Base.php": (
                "<?php\n"
                "namespace App;\n"
                "\n"
                "/**\n"
                " * Base model.\n"
                " */\n"
                "abstract class Base {\n"
                "    public $id;\n"
                "    protected static $registry = [];\n"
                "    const VERSION = '1.0';\n"
                "\n"
                "    public function __construct(int $id, string $name = 'x') {}\n"
                "    public function getId(): int { return $this->id; }\n"
                "    private function secret() {}\n"
                "    public static function create(...$args): static { return new static(...$args); }\n"
                "}\n"
            ),
            "App/User.php": (
                "<?php\n"
                "namespace App;\n"
                "\n"
                "use App\\Contracts\\Renderable as View;\n"
                "\n"
                "class User extends Base implements View {\n"
                "    public function getName(): string { return 'u'; }\n"
                "    public function render() {}\n"
                "}\n"
            ),
            "App/Contracts/Renderable.php": (
                "<?php\n"
                "namespace App\\Contracts;\n"
                "\n"
                "interface Renderable {\n"
                "    public function render();\n"
                "}\n"
            ),
            "helpers.php": (
                "<?php\n"
                "/**\n"
                " * Format a greeting.\n"
                " * @param string $name who to greet\n"
                " * @return string\n"
                " */\n"
                "function greet($name) { return 'hi ' . $name; }\n"
            ),
            "vendor/lib/Ignored.php": "<?php class Ignored {}\n",
            "README.md": "not php\n",
        },
    )
