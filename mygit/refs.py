from pathlib import Path
from typing import Optional

DEFAULT_BRANCH = 'refs/heads/main'


def refs_dir(git_dir: Path) -> Path:
    return git_dir / 'refs'


def read_symbolic_ref(git_dir: Path, ref: str = 'HEAD') -> Optional[str]:
    p = git_dir / ref
    if not p.exists():
        return None
    value = p.read_text().strip()
    if value.startswith('ref:'):
        return value.split(':', 1)[1].strip()
    return None


def write_symbolic_ref(git_dir: Path, ref: str, target: str):
    p = git_dir / ref
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(f'ref: {target}\n')
