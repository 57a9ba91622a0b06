"""
Static table of packagecloud distribution/version identifiers.

packagecloud addresses an OS release by an internal numeric id. The ids below
come from `GET /api/v1/distributions.json`; use the `get_distributions` method
of the helper to look up releases missing here.
"""

DISTRO_VERSION_IDS = {
    "ubuntu": {
        "trusty": "20",
        "xenial": "165",
        "bionic": "190",
        "focal": "210",
        "jammy": "237",
        "noble": "284",
    },
    "debian": {
        "jessie": "25",
        "stretch": "149",
        "buster": "150",
        "bullseye": "207",
        "bookworm": "215",
    },
    "el": {
        "6": "27",
        "7": "140",
        "8": "205",
        "9": "240",
    },
    "fedora": {
        "37": "248",
        "38": "259",
    },
    "raspbian": {
        "stretch": "156",
        "buster": "183",
        "bullseye": "226",
    },
}


def distro_version_id(distro, version):
    """
    Function which resolves a (distribution, version) pair to the packagecloud id.

    :param distro: `String` distribution name, e.g. `ubuntu`.
    :param version: `String` distribution version, e.g. `focal`.
    :return: `String` id, or None if the pair is unknown.
    """
    return DISTRO_VERSION_IDS.get(distro, {}).get(version)


def known_distributions():
    return sorted((distro, version) for distro, versions in DISTRO_VERSION_IDS.items() for version in versions)
