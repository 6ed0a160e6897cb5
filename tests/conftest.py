"""Shared fixtures: canned WildFire responses and a configured client."""

from unittest.mock import MagicMock

import pytest

from wildfire_utility.config import WildFireConfig
from wildfire_utility.wildfire_client import WildFireClient

API_KEY = "A1b2C3d4" * 8
SHA256 = "12a6a16f9f0f7d22d000d1bbd75a96d882d4e3e481bc0eb4b62b1aeb65855bb3"
MD5 = "d41d8cd98f00b204e9800998ecf8427e"

UPLOAD_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<wildfire>
    <upload-file-info>
        <url></url>
        <filetype>PE32 executable</filetype>
        <filename>sample.exe</filename>
        <sha256>{SHA256}</sha256>
        <md5>{MD5}</md5>
        <size>5120</size>
    </upload-file-info>
</wildfire>
"""

VERDICT_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<wildfire>
    <get-verdict-info>
        <sha256>{SHA256}</sha256>
        <verdict>1</verdict>
        <md5>{MD5}</md5>
    </get-verdict-info>
</wildfire>
"""

LINK_XML = """<?xml version="1.0" encoding="UTF-8"?>
<wildfire>
    <submit-link-info>
        <url>http://example.com/payload</url>
        <sha256>b7b8d6c2e4f0a1d3c5e7f9a0b2c4d6e8f0a2b4c6d8e0f2a4b6c8d0e2f4a6b8c0</sha256>
        <md5>0cc175b9c0f1b6a831c399e269772661</md5>
    </submit-link-info>
</wildfire>
"""

ERROR_XML = """<?xml version="1.0" encoding="UTF-8"?>
<error>
    <error-message>'Invalid API key'</error-message>
</error>
"""


def make_response(status_code=200, text=VERDICT_XML):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.ok = 200 <= status_code < 400
    return response


@pytest.fixture
def wildfire_config():
    return WildFireConfig(host="https://wildfire.example.test", api_key=API_KEY)


@pytest.fixture
def client(wildfire_config):
    client = WildFireClient(wildfire_config)
    yield client
    client.close()
