# Copyright 2020-present Kensho Technologies, LLC.
import shutil
import tempfile
import unittest

import pytest

from ..exceptions import ArmorError


gpg = pytest.importorskip("gpg")
armor = pytest.importorskip("gpg_expiry.armor")

# WARNING: rsa2048 keys are generated here only because they sign and encrypt with a single
# key and are quick to make. Nothing in these tests is meant to be secure.
TEST_KEY_ALGORITHM = "rsa2048"
BODY = "This message is to remind you that your GPG key:\n> ...\n"


class TestArmorBody(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        """Create a throwaway key able to sign and encrypt"""
        cls.gpg_home_dir = tempfile.mkdtemp()
        with gpg.Context(
            home_dir=cls.gpg_home_dir,
            armor=True,
            offline=True,
            pinentry_mode=gpg.constants.PINENTRY_MODE_LOOPBACK,
        ) as ctx:
            new_key = ctx.create_key(
                "notify@example.com",
                algorithm=TEST_KEY_ALGORITHM,
                expires_in=24 * 60 * 60,
                sign=True,
                encrypt=True,
                passphrase=None,
            )
            cls.fingerprint = new_key.fpr

    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(cls.gpg_home_dir, ignore_errors=True)

    def test_plain(self):
        self.assertEqual(armor.armor_body(BODY, home_dir=self.gpg_home_dir), BODY)

    def test_encrypt(self):
        armored = armor.armor_body(BODY, encrypt_to=self.fingerprint, home_dir=self.gpg_home_dir)
        self.assertTrue(armored.startswith("-----BEGIN PGP MESSAGE-----"))
        self.assertNotIn("remind you", armored)

        with gpg.Context(home_dir=self.gpg_home_dir, armor=True) as ctx:
            plaintext, _, _ = ctx.decrypt(armored.encode("utf-8"), verify=False)
        self.assertEqual(plaintext.decode("utf-8"), BODY)

    def test_encrypt_and_sign(self):
        armored = armor.armor_body(
            BODY, encrypt_to=self.fingerprint, sign_as=self.fingerprint, home_dir=self.gpg_home_dir
        )
        with gpg.Context(home_dir=self.gpg_home_dir, armor=True) as ctx:
            plaintext, _, verify_result = ctx.decrypt(armored.encode("utf-8"))
        self.assertEqual(plaintext.decode("utf-8"), BODY)
        self.assertEqual(verify_result.signatures[0].fpr, self.fingerprint)

    def test_clear_sign(self):
        armored = armor.armor_body(BODY, sign_as=self.fingerprint, home_dir=self.gpg_home_dir)
        self.assertTrue(armored.startswith("-----BEGIN PGP SIGNED MESSAGE-----"))
        self.assertIn("remind you", armored)

    def test_unknown_recipient(self):
        with self.assertRaises(ArmorError):
            armor.armor_body(BODY, encrypt_to="D" * 40, home_dir=self.gpg_home_dir)
