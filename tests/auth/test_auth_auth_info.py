import unittest

from gdrivefs.auth import AuthInfo


class TestAuthInfo(unittest.TestCase):
    def test_auth_info_valid_oauth(self) -> None:
        info = AuthInfo(
            kind="oauth",
            data={
                "client_secrets_file": "/tmp/client_secrets.json",
                "token_file": "/tmp/token.json",
            },
        )
        self.assertEqual(info.kind, "oauth")
        self.assertEqual(info.token_file, "/tmp/token.json")
        self.assertEqual(info.flow, "local_server")
        self.assertEqual(info.port, 0)

    def test_auth_info_console_flow(self) -> None:
        info = AuthInfo(
            kind="oauth",
            data={
                "client_secrets_file": "c.json",
                "token_file": "t.json",
                "flow": "console",
            },
        )
        self.assertEqual(info.flow, "console")

    def test_auth_info_invalid_kind(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo(kind="service_account", data={})

    def test_auth_info_missing_keys(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo(kind="oauth", data={"client_secrets_file": "x"})

    def test_auth_info_invalid_flow_and_port(self) -> None:
        base = {"client_secrets_file": "c.json", "token_file": "t.json"}
        with self.assertRaises(ValueError):
            AuthInfo(kind="oauth", data={**base, "flow": "browser"})
        with self.assertRaises(ValueError):
            AuthInfo(kind="oauth", data={**base, "port": -1})


if __name__ == "__main__":
    unittest.main()
