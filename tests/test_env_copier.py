"""Tests for .env file propagation"""
from git_workspace_keeper.services.env_copier import EnvFileCopier


class TestEnvFileCopier:
    """Test copying of .env files into a new worktree."""

    def test_copies_root_and_nested_files(self, temp_dir):
        source = temp_dir / "src"
        dest = temp_dir / "dest"
        (source / "apps" / "web").mkdir(parents=True)
        dest.mkdir()
        (source / ".env").write_text("ROOT=1\n")
        (source / "apps" / "web" / ".env.local").write_text("WEB=1\n")
        (source / "README.md").write_text("not copied\n")

        copied = EnvFileCopier().copy_env_files(str(source), str(dest))

        assert sorted(copied) == [".env", "apps/web/.env.local"]
        assert (dest / ".env").read_text() == "ROOT=1\n"
        assert (dest / "apps" / "web" / ".env.local").read_text() == "WEB=1\n"
        assert not (dest / "README.md").exists()

    def test_never_overwrites(self, temp_dir):
        source = temp_dir / "src"
        dest = temp_dir / "dest"
        source.mkdir()
        dest.mkdir()
        (source / ".env").write_text("NEW=1\n")
        (dest / ".env").write_text("KEEP=1\n")

        copied = EnvFileCopier().copy_env_files(str(source), str(dest))

        assert copied == []
        assert (dest / ".env").read_text() == "KEEP=1\n"

    def test_skips_default_directories(self, temp_dir):
        source = temp_dir / "src"
        dest = temp_dir / "dest"
        for skipped in ("node_modules/pkg", ".git", "dist", ".venv"):
            (source / skipped).mkdir(parents=True)
            (source / skipped / ".env").write_text("SKIP=1\n")
        dest.mkdir()

        assert EnvFileCopier().copy_env_files(str(source), str(dest)) == []
        assert not (dest / "node_modules").exists()

    def test_custom_skip_dirs(self, temp_dir):
        source = temp_dir / "src"
        dest = temp_dir / "dest"
        (source / "secret").mkdir(parents=True)
        (source / "node_modules").mkdir()
        (source / "secret" / ".env").write_text("S=1\n")
        (source / "node_modules" / ".env").write_text("N=1\n")
        dest.mkdir()

        copied = EnvFileCopier(skip_dirs=["secret"]).copy_env_files(str(source), str(dest))

        assert copied == ["node_modules/.env"]

    def test_missing_source_is_empty(self, temp_dir):
        assert EnvFileCopier().copy_env_files(str(temp_dir / "nope"), str(temp_dir)) == []
