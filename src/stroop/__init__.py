from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("stroop-task")
except PackageNotFoundError:
    __version__ = "unknown"
