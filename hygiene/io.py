from typing import List, Iterable

from pathlib import Path
import pathspec

##################################################################################################
# File Reading
##################################################################################################

def read_text_file(path: Path) -> str:
    assert isinstance(path, Path), f"Expected Path, got {type(path)}"
    assert path.exists(), f"File {path} does not exist"
    with open(path, 'rt', encoding='utf-8', errors='replace') as f:
        return f.read()

##################################################################################################
# File Sets
##################################################################################################

class FileSet:
    def __init__(self, patterns: List[str]):
        self.patterns = list(patterns)
        self.path_spec = pathspec.PathSpec.from_lines('gitwildmatch', self.patterns)

    def __call__(self, path: Path) -> bool:
        # Paths are relative to the repository root
        return self.path_spec.match_file(path.as_posix())

    def filter(self, paths: Iterable[Path]) -> List[Path]:
        return [path for path in paths if self(path)]
