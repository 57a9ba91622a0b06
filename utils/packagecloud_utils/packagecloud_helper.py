#!/usr/bin/python3
import argparse
import json
import logging
import os
import sys
from urllib.parse import urlparse

import requests

from packagecloud_utils.distributions import distro_version_id, known_distributions
from packagecloud_utils.errors import (
    MissingTokenError,
    PackageNotFoundError,
    SourceFetchError,
    TransportError,
    UnexpectedStatusError,
    UnknownDistributionError,
    ValidationError,
)

########################### Global Vars Instantiation ####################
API_URL = os.environ.get("PACKAGECLOUD_URL", "https://packagecloud.io").rstrip("/") + "/api/v1"
HEADERS = {"Pragma": "no-cache", "Accept": "application/json"}

logger = logging.getLogger(__name__)

########################### Define Arguments #############################
def set_arguments(argv=None):
    parser = argparse.ArgumentParser(
        prog="Packagecloud Helper Script",
        description="This is a helper script for interacting with the packagecloud server. " +\
                    "Required environmental variables: PACKAGECLOUD_TOKEN. " +\
                    "Optional: PACKAGECLOUD_USER, PACKAGECLOUD_URL.",
        epilog="Common error codes: 401: Unauthorized, 404: Not Found, 422: Unprocessable Entity " +\
            "https://packagecloud.io/docs/api")
    parser.add_argument('--method', help="Method to invoke from this script.")
    parser.add_argument('--repo', help="Name of the packagecloud repository to perform the actions, `user/repo`.")
    parser.add_argument('--distro', help="Distribution name of the package, e.g. `ubuntu`.")
    parser.add_argument('--distro_version', help="Distribution version of the package, e.g. `focal`.")
    parser.add_argument('--local_path', help="Local path or http(s) URL of a package file.")
    parser.add_argument('--new_repo', help="Name of the repository to promote a package to.")
    return parser.parse_args(argv)

def configure_logger(console=False):
    logger.setLevel(logging.INFO)

    if logger.handlers and not console:
        return

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    if console or __name__ == "__main__":
        handler = logging.StreamHandler(sys.stdout)
    else:
        handler = logging.FileHandler(os.devnull)

    logger.addHandler(handler)

configure_logger()

########################### Define Helper Methods ########################
def get_token():
    """
    Function which returns the packagecloud API token used as the basic auth username.

    :return: `String` token read from PACKAGECLOUD_TOKEN.
    """
    token = os.environ.get("PACKAGECLOUD_TOKEN")
    if not token:
        raise MissingTokenError("PACKAGECLOUD_TOKEN variable is not exported.")
    return token

def normalize_repo(repo):
    """
    Function which prefixes a bare repository name with PACKAGECLOUD_USER, if set.

    :param repo: `String` repository name, `repo` or `user/repo`.
    :return: `String` repository name as used in the API paths.
    """
    user = os.environ.get("PACKAGECLOUD_USER")
    if repo and "/" not in repo and user:
        return f"{user}/{repo}"
    return repo

def file_name(fpath):
    if fpath.startswith(("http://", "https://")):
        fpath = urlparse(fpath).path
    return os.path.basename(fpath)

def _request(method, url, **kwargs):
    try:
        return requests.request(method, url, headers=HEADERS, auth=(get_token(), ""), **kwargs)
    except requests.RequestException as e:
        raise TransportError(f"http {method.upper()}: {e}") from e

def _json_body(response):
    try:
        return response.json()
    except ValueError:
        return {}

def _open_source(fpath):
    # Returns the package bytes or file object, and the object to close once the upload is done.
    if fpath.startswith(("http://", "https://")):
        # The whole body is read here so a broken download surfaces as a requests error.
        try:
            r = requests.get(fpath)
        except requests.RequestException as e:
            raise TransportError(f"http GET: {e}") from e
        if not r.ok:
            body = r.text
            r.close()
            raise SourceFetchError(f"http GET: {r.status_code} {r.reason}\n>> {body!r}", r.status_code, body)
        return r.content, r

    try:
        f = open(fpath, "rb")
    except OSError as e:
        raise SourceFetchError(f"file open: {e}") from e
    return f, f

def push_package(repo, distro, version, fpath):
    """
    Function which uploads a package file to a packagecloud repository. The
    (`distro`, `version`) pair is resolved to a packagecloud distro version id
    before anything is sent.

    :param repo: `String` destination repository, `user/repo`.
    :param distro: `String` distribution name, e.g. `ubuntu`.
    :param version: `String` distribution version, e.g. `focal`.
    :param fpath: `String` local path or http(s) URL of the package file.
    :return: `Dict` package description returned by packagecloud.
    """
    dv_id = distro_version_id(distro, version)
    if dv_id is None:
        raise UnknownDistributionError(distro, version)
    get_token()

    fname = file_name(fpath)
    url = f"{API_URL}/repos/{repo}/packages.json"

    stream, source = _open_source(fpath)
    try:
        r = _request(
            "post",
            url,
            data={"package[distro_version_id]": dv_id},
            files={"package[package_file]": (fname, stream)},
        )
    except OSError as e:
        raise SourceFetchError(f"file read: {e}") from e
    finally:
        source.close()

    if r.status_code == 201:
        logger.info(f"Package {fname} uploaded to {repo} as {distro}/{version}")
        return _json_body(r)
    if r.status_code == 422:
        raise ValidationError(r.text)
    raise UnexpectedStatusError(r.status_code, r.reason, r.text)

def promote_package(dst_repo, src_repo, distro, version, fpath):
    """
    Function which promotes a package from `src_repo` to `dst_repo`.

    :param dst_repo: `String` repository to promote the package to.
    :param src_repo: `String` repository currently holding the package.
    :param distro: `String` distribution name of the package.
    :param version: `String` distribution version of the package.
    :param fpath: `String` path of the package file, only its base name is used.
    :return: `Dict` package description returned by packagecloud.
    """
    fname = file_name(fpath)
    url = f"{API_URL}/repos/{src_repo}/{distro}/{version}/{fname}/promote.json"

    r = _request("post", url, files={"destination": (None, dst_repo)})

    if r.status_code == 200:
        logger.info(f"Package {fname} promoted from {src_repo} to {dst_repo}")
        return _json_body(r)
    if r.status_code == 404:
        raise PackageNotFoundError(url, r.text)
    raise UnexpectedStatusError(r.status_code, r.reason, r.text)

def delete_package(repo, distro, version, fpath):
    """
    Function which deletes a package from a packagecloud repository.

    :param repo: `String` repository holding the package.
    :param distro: `String` distribution name of the package.
    :param version: `String` distribution version of the package.
    :param fpath: `String` path of the package file, only its base name is used.
    """
    fname = file_name(fpath)
    url = f"{API_URL}/repos/{repo}/{distro}/{version}/{fname}"

    r = _request("delete", url)

    if r.status_code == 200:
        logger.info(f"Package {fname} deleted from {repo} ({distro}/{version})")
        return None
    if r.status_code == 404:
        raise PackageNotFoundError(url, r.text)
    raise UnexpectedStatusError(r.status_code, r.reason, r.text)

def get_distributions():
    """
    Function which fetches the distributions supported by packagecloud, with their ids.

    :return: `Dict` distributions grouped by package type (deb, rpm, ...).
    """
    r = _request("get", f"{API_URL}/distributions.json")
    if r.status_code != 200:
        raise UnexpectedStatusError(r.status_code, r.reason, r.text)
    distributions = _json_body(r)
    logger.info(json.dumps(distributions, indent=2))
    return distributions

def list_distributions():
    """
    Function which lists the (distribution, version) pairs known without a server call.

    :return: `List` of (distro, version) tuples.
    """
    pairs = known_distributions()
    for distro, version in pairs:
        logger.info(f"{distro}/{version}: {distro_version_id(distro, version)}")
    return pairs

# method name -> (function, command line flags passed as positional arguments)
METHODS = {
    "push_package": (push_package, ("repo", "distro", "distro_version", "local_path")),
    "promote_package": (promote_package, ("new_repo", "repo", "distro", "distro_version", "local_path")),
    "delete_package": (delete_package, ("repo", "distro", "distro_version", "local_path")),
    "get_distributions": (get_distributions, ()),
    "list_distributions": (list_distributions, ()),
}

def main(argv=None):
    args = set_arguments(argv)
    configure_logger(console=True)

    if args.method is None:
        # Set pager to cat so that scrolling is not enabled
        os.environ['PAGER'] = 'cat'
        logger.info("\nWARNING: Method argument is missing!")
        for method, _ in METHODS.values():
            help(method)
        return None

    if args.method not in METHODS:
        raise SystemError("Method not found: " + args.method)
    logger.info(args.method)
    method, flags = METHODS[args.method]

    values = []
    for flag in flags:
        value = getattr(args, flag)
        if not value:
            raise SystemError(f"--{flag} is required for {args.method}.")
        if flag in ("repo", "new_repo"):
            value = normalize_repo(value)
        values.append(value)

    return method(*values)

if __name__ ==  "__main__":
    main()

############################ End of File ###############################
