"""Tracking of configuration input files and writing their dependency file."""

from __future__ import annotations

import os

from .lib import ToyError

__all__ = ["FileList"]


class FileList:
    """Names of files read, newest first, each recorded once."""

    def __init__(self):
        self.names = []

    def lookup(self, name):
        """Return name, recording it first if it is new."""
        for known in self.names:
            if known == name:
                return known
        self.names.insert(0, name)
        return name

    def __iter__(self):
        return iter(self.names)

    def __len__(self):
        return len(self.names)

    def write_dep(self, name=None, tmpname="..config.tmp"):
        """Write a make dependency file listing every recorded file."""
        if name is None:
            name = ".kconfig.d"
        parts = ["deps_config := \\\n"]
        for index, fname in enumerate(self.names):
            more = index + 1 < len(self.names)
            parts.append(f"\t{fname} \\\n" if more else f"\t{fname}\n")
        parts.append(
            "\ninclude/config/auto.conf: \\\n\t$(deps_config)\n\n$(deps_config): ;\n"
        )
        try:
            with open(tmpname, "w") as out:
                out.write("".join(parts))
        except OSError as exc:
            raise ToyError(f"cannot write {tmpname}") from exc
        os.replace(tmpname, name)