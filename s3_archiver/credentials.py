from __future__ import annotations
import configparser
import logging
from pathlib import Path
from typing import Dict, Optional

import boto3

from .errors import (
    CredentialsFileNotFound,
    CredentialsParseError,
    IncompleteProfile,
    ProfileNotFound,
)

log = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"
ACCESS_KEY_FIELD = "aws_access_key_id"


def default_credentials_path() -> Path:
    return Path.home() / ".aws" / "credentials"


def check_profile(cred_file: str | Path, profile: str) -> Dict[str, str]:
    """
    Read an INI credentials file and return the settings of `profile`.

    Raises CredentialsFileNotFound / CredentialsParseError when the file cannot be
    read or parsed, ProfileNotFound when the section is missing and IncompleteProfile
    when the section carries no access key.
    """
    parser = configparser.ConfigParser(default_section="__no_defaults__", interpolation=None)
    try:
        with open(cred_file, "r", encoding="utf-8") as f:
            parser.read_file(f)
    except OSError as e:
        raise CredentialsFileNotFound(f"Could not find credentials file {cred_file}: {e}") from e
    except (configparser.Error, UnicodeDecodeError) as e:
        raise CredentialsParseError(f"Could not parse credentials file {cred_file}: {e}") from e

    if not parser.has_section(profile):
        raise ProfileNotFound(f"Could not find profile '{profile}' in credentials file {cred_file}")
    section = dict(parser.items(profile))
    if not section.get(ACCESS_KEY_FIELD):
        raise IncompleteProfile(f"Could not find access key in profile '{profile}'")
    return section


def resolve_credentials(
    skip: bool,
    cred_file: str | Path,
    profile: str,
    region: Optional[str] = None,
) -> boto3.Session:
    """
    Return a boto3 session for the run.

    With `skip` the ambient credential chain is used as-is. Otherwise the profile is
    looked up in `cred_file` and the session is built from its keys, bound to `region`
    (us-east-1 unless given).
    """
    if skip:
        log.debug("Skipping profile check; using default credentials")
        return boto3.Session(region_name=region)

    section = check_profile(cred_file, profile)
    log.debug("Using profile '%s' from %s", profile, cred_file)
    return boto3.Session(
        aws_access_key_id=section[ACCESS_KEY_FIELD],
        aws_secret_access_key=section.get("aws_secret_access_key"),
        aws_session_token=section.get("aws_session_token"),
        region_name=region or DEFAULT_REGION,
    )
