from typing import Any, Dict

from fastapi import status
from vetclinic_iam.libs.result import Error


class ClientError(Exception):
    """Caller-correctable failure; code, message and details reach the response"""

    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)

    def body(self) -> Dict[str, Any]:
        error_dict = {"code": self.base_error.code, "message": self.base_error.message}
        if self.base_error.details:
            error_dict["details"] = self.base_error.details
        return {"error": error_dict}


class ServerError(Exception):
    """Internal failure; only the code is exposed"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)

    def body(self) -> Dict[str, Any]:
        return {"error": {"code": self.base_error.code, "message": "Internal server error"}}
