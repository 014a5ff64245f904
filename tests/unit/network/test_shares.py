"""Tests for share-listing commands, parsing and outcome classification."""

from __future__ import annotations

import unittest

from freefinder.location import ShareProtocol
from freefinder.network.shares import (
    AuthFailureClassifier,
    ShareEnumerator,
    build_enumeration_command,
    classify_enumeration,
    parse_share_listing,
)
from freefinder.network.types import (
    Credentials,
    EnumerationAuthRequired,
    EnumerationFailed,
    NetworkShare,
    ProcessOutcome,
    SharesListed,
)

SMBCLIENT_OUTPUT = """\
Disk|Public|Shared files
Disk|Media|
IPC|IPC$|IPC Service
Printer|LaserJet|
Workgroup|WORKGROUP|NAS
"""

SMBUTIL_OUTPUT = """\
Share                                           Type    Comments
-------------------------------
Public                                          Disk
Time Machine                                    Disk    backups
IPC$                                            Pipe    IPC Service

3 shares listed
"""


class EnumerationCommandTests(unittest.TestCase):
    def test_smbclient_guest_and_credentials(self) -> None:
        self.assertEqual(
            build_enumeration_command("nas.local", None, platform="linux"),
            ["smbclient", "-g", "-L", "//nas.local", "-N"],
        )
        self.assertEqual(
            build_enumeration_command("nas.local", Credentials("alice", "s3cret"), platform="linux"),
            ["smbclient", "-g", "-L", "//nas.local", "-U", "alice%s3cret"],
        )

    def test_smbutil_embeds_encoded_credentials(self) -> None:
        argv = build_enumeration_command("nas.local", Credentials("al ice", "p@ss"), platform="darwin")
        self.assertEqual(argv, ["/usr/bin/smbutil", "view", "//al%20ice:p%40ss@nas"])


class ShareListingParserTests(unittest.TestCase):
    def test_parses_pipe_format_disk_shares_only(self) -> None:
        shares = parse_share_listing(SMBCLIENT_OUTPUT, "nas.local")
        self.assertEqual([share.name for share in shares], ["Public", "Media"])
        self.assertEqual(shares[0], NetworkShare("nas.local", "Public", ShareProtocol.SMB))
        self.assertEqual(shares[0].id, "nas.local/Public")

    def test_parses_table_format(self) -> None:
        shares = parse_share_listing(SMBUTIL_OUTPUT, "nas.local")
        self.assertEqual([share.name for share in shares], ["Public", "Time Machine"])

    def test_duplicates_are_dropped(self) -> None:
        shares = parse_share_listing("Disk|Public|\nDisk|Public|\n", "nas.local")
        self.assertEqual(len(shares), 1)


class ClassificationTests(unittest.TestCase):
    def test_success_lists_shares(self) -> None:
        result = classify_enumeration(ProcessOutcome(0, "Disk|Public|\n", ""), "nas.local", AuthFailureClassifier())
        self.assertIsInstance(result, SharesListed)
        self.assertEqual([share.name for share in result.shares], ["Public"])

    def test_auth_exit_status_and_text(self) -> None:
        classifier = AuthFailureClassifier()
        self.assertTrue(classifier(ProcessOutcome(77, "", "")))
        self.assertTrue(classifier(ProcessOutcome(1, "", "session setup failed: NT_STATUS_LOGON_FAILURE")))
        self.assertTrue(classifier(ProcessOutcome(68, "", "")))
        self.assertFalse(classifier(ProcessOutcome(1, "", "Connection to nas failed (NT_STATUS_HOST_UNREACHABLE)")))
        self.assertFalse(classifier(ProcessOutcome(-1, "", "permission denied")))

    def test_generic_failure_carries_message(self) -> None:
        result = classify_enumeration(ProcessOutcome(1, "", "host unreachable\n"), "nas.local", lambda outcome: False)
        self.assertEqual(result, EnumerationFailed("host unreachable"))

    def test_classifier_is_pluggable(self) -> None:
        result = classify_enumeration(ProcessOutcome(3, "", "weird"), "nas.local", lambda outcome: outcome.exit_status == 3)
        self.assertIsInstance(result, EnumerationAuthRequired)


class ShareEnumeratorTests(unittest.TestCase):
    def test_enumerate_runs_command_and_classifies(self) -> None:
        calls: list[list[str]] = []

        def run(argv):
            calls.append(list(argv))
            return ProcessOutcome(0, SMBCLIENT_OUTPUT, "")

        enumerator = ShareEnumerator(run=run, platform="linux")
        result = enumerator.enumerate("nas.local", Credentials("bob", "pw"))

        self.assertIsInstance(result, SharesListed)
        self.assertEqual(calls, [["smbclient", "-g", "-L", "//nas.local", "-U", "bob%pw"]])


if __name__ == "__main__":
    unittest.main()
