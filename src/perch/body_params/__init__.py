"""Body-parsing strategies — turn raw request bodies into parsed params.

Each strategy answers two questions: does it handle this content type
(``match``), and what is the parsed body (``parse``). The
``BodyParamsMiddleware`` picks the first strategy that matches.

Built-in strategies:
    JsonStrategy -- ``application/json`` and any ``+json`` type
    FormUrlEncodedStrategy -- ``application/x-www-form-urlencoded``
    MultipartStrategy -- ``multipart/form-data`` (requires python-multipart)
"""

from perch.body_params.form_strategy import FormUrlEncodedStrategy
from perch.body_params.json_strategy import JsonStrategy
from perch.body_params.multipart_strategy import MultipartStrategy, UploadFile
from perch.body_params.protocol import Strategy

__all__ = [
    "FormUrlEncodedStrategy",
    "JsonStrategy",
    "MultipartStrategy",
    "Strategy",
    "UploadFile",
]
