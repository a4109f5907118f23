# =============================================================================
# client/upload.py - Direct Upload Flow
# =============================================================================
# Moves one file from the operator straight to the storage bucket:
#
#   IDLE -> FILE_SELECTED -> REQUESTING_AUTHORIZATION -> UPLOADING
#        -> SUCCEEDED | FAILED
#
# The API server only signs; the bytes never pass through it. Selecting
# a file never starts a transfer, upload() does.
#
# Usage:
#   flow = DirectUploadFlow(api, transfer_http)
#   flow.select_file("avatar.png", data, "image/png")
#   await flow.upload()
#   if flow.state == UploadState.SUCCEEDED:
#       form.attach_image(flow.public_url)
# =============================================================================

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

import httpx

from core.models.upload import UploadAuthorization, UploadMethod

from .api import ContactsAPI, ContactsAPIError

logger = logging.getLogger(__name__)


class UploadState(str, Enum):
    IDLE = "idle"
    FILE_SELECTED = "file_selected"
    REQUESTING_AUTHORIZATION = "requesting_authorization"
    UPLOADING = "uploading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_STATES = frozenset({UploadState.SUCCEEDED, UploadState.FAILED})


class InvalidTransitionError(Exception):
    """An action was attempted from a state that does not allow it."""

    def __init__(self, action: str, state: UploadState):
        super().__init__(f"Cannot {action} while {state.value}")
        self.action = action
        self.state = state


class UploadRejectedError(Exception):
    """The authorization cannot be used for the selected file."""


def _basename(file_name: str) -> str:
    return file_name.replace("\\", "/").rsplit("/", 1)[-1].strip()


class DirectUploadFlow:
    """
    One operator's upload widget.

    Args:
        api: Client used to request the upload authorization
        transfer: httpx client used for the transfer itself. It must not
            carry the API's bearer token, the storage service rejects it.
        on_complete: Called with the public URL after a successful upload
        clock: Returns the current UTC time; used for the expiry check
    """

    def __init__(
        self,
        api: ContactsAPI,
        transfer: httpx.AsyncClient,
        on_complete: Callable[[str], None] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.api = api
        self.transfer = transfer
        self.on_complete = on_complete
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self._clear()

    def _clear(self) -> None:
        self.state = UploadState.IDLE
        self.file_name: str | None = None
        self.content: bytes | None = None
        self.content_type: str | None = None
        self.authorization: UploadAuthorization | None = None
        self.public_url: str | None = None
        self.error: str | None = None

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def select_file(self, file_name: str, content: bytes, content_type: str) -> None:
        if self.state in TERMINAL_STATES:
            self.reset()
        if self.state not in (UploadState.IDLE, UploadState.FILE_SELECTED):
            raise InvalidTransitionError("select a file", self.state)

        self.file_name = file_name
        self.content = content
        self.content_type = content_type
        self.state = UploadState.FILE_SELECTED
        logger.debug(f"Selected {file_name} ({content_type}, {len(content)} bytes)")

    def reset(self) -> None:
        if self.state in (UploadState.REQUESTING_AUTHORIZATION, UploadState.UPLOADING):
            raise InvalidTransitionError("reset", self.state)
        self._clear()

    async def upload(self) -> str | None:
        """
        Request an authorization and transfer the selected file.

        Returns:
            The public URL on success, None on failure (see `error`)
        """
        if self.state != UploadState.FILE_SELECTED:
            raise InvalidTransitionError("upload", self.state)

        # Every exit from here on lands in SUCCEEDED or FAILED
        self.state = UploadState.REQUESTING_AUTHORIZATION
        try:
            authorization = await self.api.request_upload_authorization(
                self.file_name, self.content_type
            )
        except ContactsAPIError as e:
            self._fail(f"Could not get upload authorization: {e.message}")
            return None
        except Exception as e:
            logger.exception(f"Unexpected error requesting authorization for {self.file_name}")
            self._fail(f"Could not get upload authorization: {e}")
            return None

        try:
            self._check_authorization(authorization)
        except UploadRejectedError as e:
            self._fail(str(e))
            return None

        self.authorization = authorization
        self.state = UploadState.UPLOADING
        try:
            response = await self._transfer(authorization)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self._fail(f"Upload failed: {e}")
            return None
        except Exception as e:
            logger.exception(f"Unexpected error uploading {self.file_name}")
            self._fail(f"Upload failed: {e}")
            return None

        if not response.is_success:
            self._fail(f"Upload failed with status {response.status_code}")
            return None

        self.public_url = authorization.public_url
        self.state = UploadState.SUCCEEDED
        logger.info(f"Uploaded {self.file_name} to {self.public_url}")

        if self.on_complete:
            self.on_complete(self.public_url)
        return self.public_url

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _check_authorization(self, authorization: UploadAuthorization) -> None:
        if authorization.is_expired(self.clock()):
            raise UploadRejectedError("Upload authorization has expired")
        if authorization.content_type != self.content_type:
            raise UploadRejectedError(
                f"Upload authorization is for {authorization.content_type}, not {self.content_type}"
            )
        # The server may prepend a prefix but the object name must be ours
        if not authorization.key.endswith(_basename(self.file_name)):
            raise UploadRejectedError(
                f"Upload authorization is for {authorization.key}, not {self.file_name}"
            )
        if authorization.method == UploadMethod.PUT and not authorization.upload_url:
            raise UploadRejectedError("Upload authorization has no upload URL")
        if authorization.method == UploadMethod.POST and not authorization.url:
            raise UploadRejectedError("Upload authorization has no form URL")

    async def _transfer(self, authorization: UploadAuthorization) -> httpx.Response:
        if authorization.method == UploadMethod.PUT:
            return await self.transfer.put(
                authorization.upload_url,
                content=self.content,
                headers={"Content-Type": self.content_type},
            )
        # The file must be the last part of a policy POST
        return await self.transfer.post(
            authorization.url,
            data=authorization.fields or {},
            files={"file": (_basename(self.file_name), self.content, self.content_type)},
        )

    def _fail(self, message: str) -> None:
        self.state = UploadState.FAILED
        self.error = message
        logger.error(f"Upload of {self.file_name} failed: {message}")
