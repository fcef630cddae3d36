"""
Unit tests for loading the Nix profile into the runner's PATH.
"""

from devenvkit.bootstrap.nix_profile import load_nix_profile, profile_candidates


def _touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("")
    return path


class TestLoadNixProfile:
    """Tests for load_nix_profile()."""

    def test_no_profile(self, make_context, runner):
        before = runner.env["PATH"]
        assert load_nix_profile(make_context()) is None
        assert runner.env["PATH"] == before

    def test_single_user_profile(self, make_context, runner, home):
        script = _touch(home / ".nix-profile" / "etc" / "profile.d" / "nix.sh")

        assert load_nix_profile(make_context()) == script
        assert runner.env["PATH"].split(":")[0] == str(home / ".nix-profile" / "bin")

    def test_daemon_profile(self, make_context, runner, home, system_root):
        daemon = system_root / "nix" / "var" / "nix" / "profiles" / "default"
        script = _touch(daemon / "etc" / "profile.d" / "nix-daemon.sh")

        assert load_nix_profile(make_context()) == script
        assert runner.env["PATH"].split(":")[:2] == [
            str(home / ".nix-profile" / "bin"),
            str(daemon / "bin"),
        ]

    def test_single_user_wins_on_linux(self, make_context, home, system_root):
        user = _touch(home / ".nix-profile" / "etc" / "profile.d" / "nix.sh")
        _touch(system_root / "nix" / "var" / "nix" / "profiles" / "default" / "etc" / "profile.d" / "nix-daemon.sh")

        assert load_nix_profile(make_context()) == user

    def test_macos_uses_daemon_profile_only(self, make_context, home, macos):
        _touch(home / ".nix-profile" / "etc" / "profile.d" / "nix.sh")
        ctx = make_context(platform=macos)

        assert len(profile_candidates(ctx)) == 1
        assert load_nix_profile(ctx) is None

    def test_loading_twice_does_not_duplicate_path(self, make_context, runner, home):
        _touch(home / ".nix-profile" / "etc" / "profile.d" / "nix.sh")
        ctx = make_context()

        load_nix_profile(ctx)
        load_nix_profile(ctx)

        assert runner.env["PATH"].split(":").count(str(home / ".nix-profile" / "bin")) == 1
