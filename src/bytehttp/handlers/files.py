"""
=============================================================================
FILE STORAGE HANDLER
=============================================================================

Reads and writes files under the configured directory.

    GET  /files/<name>   → 200 application/octet-stream with the file bytes
                           404 if the file does not exist
    POST /files/<name>   → 201 Created, file content = request body
                           405 if the file already exists
    other methods        → 405

Reads and writes that fail at the OS level answer 500 with the error text
as the body.

=============================================================================
SECURITY: PATH TRAVERSAL
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  GET /files/../../etc/passwd HTTP/1.1                               │
    │                                                                      │
    │  Unchecked:  /tmp/bytehttp/../../etc/passwd → /etc/passwd            │
    │                                                                      │
    │  Checked:                                                            │
    │  1. Resolve the full path (follow .. and symlinks)                   │
    │  2. Check it's still inside the directory                            │
    │  3. If not, 403 Forbidden                                            │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
CONCURRENT WRITERS
=============================================================================

Two clients POSTing the same name at once must not both "win". The file is
opened with mode "xb" (O_CREAT | O_EXCL): the kernel decides atomically
which open succeeds, and the loser sees FileExistsError → 405. There is no
separate exists() check to race against.

=============================================================================
INTERVIEW QUESTIONS ABOUT FILE HANDLERS
=============================================================================

Q: "Why not check path.exists() before writing?"
A: "Check-then-act is a race. Between the check and the open another
   request can create the file, and one upload silently overwrites the
   other. Exclusive create folds both steps into one syscall."

Q: "Why application/octet-stream?"
A: "The server stores whatever bytes it was sent and makes no claim about
   their type. The client knows what it uploaded."

=============================================================================
"""

from pathlib import Path
import logging

from ..config import ServerConfig
from ..http.errors import (
    ForbiddenError,
    IOFailureError,
    MethodNotAllowedError,
    NotFoundError,
)
from ..http.protocol import HTTPMethod
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder, bad_request, created


logger = logging.getLogger(__name__)


FILES_PREFIX = "/files/"


class FileHandler:
    """
    Serves GET and POST for /files/<name>.

    =========================================================================
    USAGE
    =========================================================================

        files = FileHandler(config)
        router.add_route(prefix("/files"), files.handle, name="files")

    The directory is resolved once, here. Handlers never look configuration
    up per request.

    =========================================================================
    """

    def __init__(self, config: ServerConfig):
        """
        Args:
            config: Server configuration; its "directory" option is the
                    storage root. The directory need not exist yet: GETs
                    answer 404 and POSTs fail with 500 until it does.
        """
        self.root_dir = Path(config.get("directory") or ".").resolve()

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Handle a /files request.

        Raises:
            ForbiddenError: Name resolves outside the directory or holds a NUL.
            NotFoundError: GET of a missing file.
            MethodNotAllowedError: POST of an existing file, or another method.
            IOFailureError: The read or write itself failed.
        """
        target = request.target
        if len(target) < len(FILES_PREFIX) + 1:
            return bad_request()

        name = target[len(FILES_PREFIX):]
        path = self._resolve(name)

        if request.method == HTTPMethod.GET:
            return self._read(path)
        if request.method == HTTPMethod.POST:
            return self._write(path, request.content)

        raise MethodNotAllowedError(f"{request.method.value} not allowed on {target}")

    def _resolve(self, name: str) -> Path:
        if "\x00" in name:
            logger.warning(f"NUL byte in file name: {name!r}")
            raise ForbiddenError(f"Access denied: {name!r}")

        # resolve() follows symlinks and normalizes .. components
        full_path = (self.root_dir / name).resolve()
        try:
            full_path.relative_to(self.root_dir)
        except ValueError:
            logger.warning(f"Path traversal attempt: {name}")
            raise ForbiddenError(f"Access denied: {name}")
        if full_path == self.root_dir:
            raise ForbiddenError(f"Access denied: {name}")
        return full_path

    def _read(self, path: Path) -> HTTPResponse:
        if not path.exists():
            raise NotFoundError(f"File not found: {path.name}")

        try:
            data = path.read_bytes()
        except OSError as e:
            logger.error(f"Error reading file {path}: {e}")
            raise IOFailureError(e)

        logger.debug(f"Served {path} ({len(data)} bytes)")
        return ResponseBuilder().file(data).build()

    def _write(self, path: Path, content: bytes) -> HTTPResponse:
        try:
            with open(path, "xb") as f:
                f.write(content)
        except FileExistsError:
            raise MethodNotAllowedError(f"File already exists: {path.name}")
        except OSError as e:
            logger.error(f"Error writing file {path}: {e}")
            raise IOFailureError(e)

        logger.info(f"Created {path} ({len(content)} bytes)")
        return created()
