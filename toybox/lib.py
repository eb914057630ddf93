"""Reusable helpers shared by the commands: errors, paths, numbers and files."""

from __future__ import annotations

import os
import re
import stat
import sys
import tempfile

__all__ = [
    "ToyError",
    "TempCopy",
    "format_error",
    "abspath",
    "mkpath",
    "find_in_path",
    "utoa",
    "itoa",
    "atolx",
    "crc_table",
    "fdlength",
    "readlink",
    "get_rawline",
    "get_line",
    "sendfile",
    "loopfiles",
    "pidfile",
    "regcomp",
]

_CHUNK = 4096
_LONG_MIN = -(1 << 63)
_LONG_MAX = (1 << 63) - 1
_SUFFIXES = "kmgtpe"
_NUMBER = re.compile(
    r"\s*([+-]?)(?:0[xX]([0-9a-fA-F]+)|(0[0-7]*)|([1-9][0-9]*))"
)
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_BLKGETSIZE = 0x1260


class ToyError(Exception):
    """A fatal error: the command reports the message and exits with exitval."""

    def __init__(self, msg, exitval=1):
        super().__init__(msg)
        self.msg = msg
        self.exitval = exitval or 1


def _progname():
    if sys.argv and sys.argv[0]:
        return os.path.basename(sys.argv[0])
    return "toybox"


def format_error(name, msg, err=0):
    """Build "name: msg[: strerror(err)]" as commands print their errors."""
    parts = [name]
    if msg is not None:
        parts.append(msg)
    if err:
        parts.append(os.strerror(err))
    return ": ".join(parts)


def abspath(path, cwd=None):
    """Make path absolute and drop ".", ".." and duplicate slashes.

    Symlinks are not followed, so "dir/.." always removes "dir".
    A trailing slash (or trailing "." / "..") is kept in the result.
    """
    path = os.fspath(path)
    if not path.startswith("/"):
        base = os.getcwd() if cwd is None else os.fspath(cwd)
        path = f"{base}/{path}"

    parts = path.split("/")
    stack = []
    for part in parts:
        if part in ("", "."):
            continue
        if part == "..":
            if stack:
                stack.pop()
            continue
        stack.append(part)

    result = "/" + "/".join(stack)
    if stack and parts[-1] in ("", ".", ".."):
        result += "/"
    return result


def mkpath(path, mode=None):
    """Create every missing directory along path.

    With a mode, new directories get exactly that mode (umask ignored);
    otherwise they are created 0777 subject to the umask.
    """
    path = os.fspath(path)
    cuts = [i for i, ch in enumerate(path) if ch == "/"] + [len(path)]
    for cut in cuts:
        prefix = path[:cut]
        if not prefix or os.path.isdir(prefix):
            continue
        try:
            if mode is None:
                os.mkdir(prefix, 0o777)
            else:
                old = os.umask(0)
                try:
                    os.mkdir(prefix, mode)
                finally:
                    os.umask(old)
        except OSError as exc:
            raise ToyError(format_error(None or "mkpath", f"'{prefix}'", exc.errno)) from exc


def find_in_path(path, filename):
    """Return every regular file named filename in a colon-separated path.

    An empty entry means the current directory.
    """
    cwd = os.getcwd()
    found = []
    for entry in path.split(":"):
        candidate = f"{entry or cwd}/{filename}"
        if os.path.isfile(candidate):
            found.append(candidate)
    return found


def utoa(n, buflen=12):
    """Unsigned 32-bit decimal text, truncated to buflen-1 characters."""
    if buflen <= 0:
        return ""
    return str(n & 0xFFFFFFFF)[: buflen - 1]


def itoa(n, buflen=12):
    """Signed 32-bit decimal text, truncated to buflen-1 characters."""
    n = ((n + (1 << 31)) % (1 << 32)) - (1 << 31)
    if buflen > 0 and n < 0:
        return "-" + utoa(-n, buflen - 1)
    return utoa(n, buflen)


def atolx(text):
    """Parse an integer like strtol(base 0), allowing a k/m/g/t/p/e suffix."""
    match = _NUMBER.match(text)
    if match is None:
        value, rest = 0, text
    else:
        sign, hexdigits, octdigits, decdigits = match.groups()
        if hexdigits is not None:
            value = int(hexdigits, 16)
        elif octdigits is not None:
            value = int(octdigits, 8)
        else:
            value = int(decdigits)
        if sign == "-":
            value = -value
        value = max(_LONG_MIN, min(_LONG_MAX, value))
        rest = text[match.end():]

    if rest:
        index = _SUFFIXES.find(rest[0].lower())
        if index >= 0:
            value *= 1024 << (index * 10)
    return value


def crc_table(little_endian=False):
    """Return the 256-entry CRC32 lookup table in either bit order."""
    table = []
    for i in range(256):
        c = i if little_endian else i << 24
        for _ in range(8):
            if little_endian:
                c = (c >> 1) ^ 0xEDB88320 if c & 1 else c >> 1
            elif c & 0x80000000:
                c = ((c << 1) ^ 0x04C11DB7) & 0xFFFFFFFF
            else:
                c = (c << 1) & 0xFFFFFFFF
        table.append(c)
    return table


def _block_device_size(fd):
    try:
        if not stat.S_ISBLK(os.fstat(fd).st_mode):
            return None
        import fcntl
        import struct

        raw = fcntl.ioctl(fd, _BLKGETSIZE, bytes(struct.calcsize("L")))
        return struct.unpack("L", raw)[0] * 512
    except (OSError, ImportError):
        return None


def _readable_at(fd, pos):
    try:
        os.lseek(fd, pos, os.SEEK_SET)
        return len(os.read(fd, 1)) == 1
    except OSError:
        return False


def fdlength(fd):
    """Length of what fd refers to, found by probing if nothing better works.

    The file position is restored afterwards; unseekable files report 0.
    """
    size = _block_device_size(fd)
    if size is not None:
        return size

    try:
        old = os.lseek(fd, 0, os.SEEK_CUR)
    except OSError:
        old = None
    try:
        if not _readable_at(fd, 0):
            return 0
        low, high = 0, 1
        while _readable_at(fd, high):
            low, high = high, high * 2
        while high - low > 1:
            mid = (low + high) // 2
            if _readable_at(fd, mid):
                low = mid
            else:
                high = mid
        return high
    finally:
        if old is not None:
            os.lseek(fd, old, os.SEEK_SET)


def readlink(name):
    """Target of a symlink, or None if it cannot be read."""
    try:
        return os.readlink(name)
    except OSError:
        return None


def get_rawline(stream, end=None):
    """Read up to and including end (default newline); None at end of input."""
    parts = []
    while True:
        c = stream.read(1)
        if not c:
            break
        parts.append(c)
        stop = end if end is not None else ("\n" if isinstance(c, str) else b"\n")
        if c == stop:
            break
    if not parts:
        return None
    return parts[0][:0].join(parts)


def get_line(stream):
    """Read one line without its trailing newline; None at end of input."""
    line = get_rawline(stream)
    if line is None:
        return None
    newline = "\n" if isinstance(line, str) else b"\n"
    return line[:-1] if line.endswith(newline) else line


def sendfile(src, dst):
    """Copy the rest of src into dst, returning the number of units copied."""
    if src is None:
        return 0
    total = 0
    while chunk := src.read(_CHUNK):
        dst.write(chunk)
        total += len(chunk)
    return total


def loopfiles(paths, function, mode="rb"):
    """Call function(file, name) for each path, "-" meaning stdin/stdout.

    With no paths, function is called once on stdin (or stdout when writing).
    Files that cannot be opened are reported on stderr and skipped.
    Returns 1 if any file failed to open, else 0.
    """
    reading = "r" in mode and "+" not in mode
    std = sys.stdin if reading else sys.stdout
    if "b" in mode:
        std = std.buffer

    if not paths:
        function(std, "-")
        return 0

    status = 0
    for path in paths:
        if path == "-":
            function(std, "-")
            continue
        try:
            handle = open(path, mode)
        except OSError as exc:
            print(format_error(_progname(), str(path), exc.errno), file=sys.stderr)
            status = 1
            continue
        with handle:
            function(handle, path)
    return status


def _atoi(text):
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _process_alive(pid):
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True


def pidfile(name, rundir="/var/run"):
    """Create rundir/NAME.pid holding our pid, replacing a stale one.

    Raises ToyError if a live process owns the file.
    """
    path = os.path.join(os.fspath(rundir), f"{name}.pid")
    for _ in range(3):
        try:
            fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except OSError:
            pass
        else:
            with os.fdopen(fd, "w") as handle:
                handle.write(f"{os.getpid()}\n")
            return path

        try:
            with open(path) as handle:
                text = handle.read(31)
        except OSError:
            continue
        if not _process_alive(_atoi(text)):
            try:
                os.unlink(path)
            except FileNotFoundError:
                pass
    raise ToyError(f"xpidfile {name}")


def regcomp(pattern, flags=0):
    """Compile a regular expression, raising ToyError if it is invalid."""
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise ToyError(f"xregcomp: {exc}") from exc


class TempCopy:
    """A temporary file beside name that replaces it on commit.

    The temporary file gets the permissions of source. Used as a context
    manager it commits on a clean exit and aborts if an exception escapes.
    """

    def __init__(self, source, name):
        self.source = source
        self.name = os.fspath(name)
        directory, base = os.path.split(self.name)
        try:
            fd, self.tempname = tempfile.mkstemp(prefix=base, dir=directory or ".")
        except OSError as exc:
            raise ToyError("no temp file") from exc
        if source is not None:
            os.fchmod(fd, stat.S_IMODE(os.fstat(source.fileno()).st_mode))
        self.file = os.fdopen(fd, "wb")
        self._finished = False

    def _finish(self):
        if self._finished:
            raise ToyError("temporary copy already finished")
        self._finished = True

    def commit(self, remaining=True):
        """Copy the rest of source (if asked) and move the copy over name."""
        self._finish()
        if self.source is not None:
            if remaining:
                sendfile(self.source, self.file)
            self.source.close()
        self.file.close()
        os.replace(self.tempname, self.name)

    def abort(self):
        """Close both files and delete the temporary copy."""
        self._finish()
        if self.source is not None:
            self.source.close()
        self.file.close()
        try:
            os.unlink(self.tempname)
        except FileNotFoundError:
            pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if not self._finished:
            if exc_type is None:
                self.commit()
            else:
                self.abort()
        return False