import os
import pathlib
import typing


PathLike = typing.Union[str, os.PathLike]


class NonExistentPathError(Exception):

    def __init__(self, path: typing.Optional[PathLike]=None) -> None:
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"The path {self.path} does not exist."
        return "The requested path does not exist."


def full_path(path: PathLike) -> pathlib.Path:
    """Expand and resolve `path`, which must exist."""
    resolved = pathlib.Path(path).expanduser().resolve()
    if not resolved.exists():
        raise NonExistentPathError(resolved)
    return resolved


def search(
    paths: typing.Iterable[typing.Optional[PathLike]],
    file: PathLike,
) -> typing.Optional[pathlib.Path]:
    """Search `paths` for `file`.

    Parameters
    ----------
    paths : iterable of path-like
        The directories to search, in the order given. Members that are `None`
        or that do not name an existing directory are skipped.

    file : path-like
        The file to locate.

    Returns
    -------
    path or `None`
        The full path to the first match, if any.
    """
    for p in paths:
        if not p:
            continue
        path = pathlib.Path(p).expanduser()
        if path.is_dir():
            test = path / str(file)
            if test.exists():
                return test.resolve()
