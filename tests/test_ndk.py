import pytest

from mobiletool import ndk
from mobiletool.android_targets import for_name
from mobiletool.ndk import (
    MIN_NDK_VERSION,
    Compiler,
    MissingToolError,
    NdkEnv,
    NdkError,
    NdkVersion,
    load_ndk_env,
    parse_required_libs,
)
from mobiletool.source_props import parse_revision


def make_ndk(root, revision):
    (root / "source.properties").write_text(f"Pkg.Desc = Android NDK\nPkg.Revision = {revision}\n")
    bin_dir = root / "toolchains" / "llvm" / "prebuilt" / ndk.host_tag() / "bin"
    bin_dir.mkdir(parents=True)
    return NdkEnv(root), bin_dir


def test_ndk_version_display():
    assert str(NdkVersion(19, 0)) == "r19"
    assert str(NdkVersion(21, 1)) == "r21b"


def test_ndk_version_minor_out_of_range():
    with pytest.raises(ValueError):
        NdkVersion(21, 26)


def test_ndk_version_from_revision_and_ordering():
    version = NdkVersion.from_revision(parse_revision("25.1.8937393"))
    assert version == NdkVersion(25, 1)
    assert version > MIN_NDK_VERSION
    assert NdkVersion(18, 1) < MIN_NDK_VERSION


def test_parse_required_libs():
    output = (
        "Dynamic section at offset 0x1000 contains 3 entries:\n"
        " 0x0000000000000001 (NEEDED)             Shared library: [libc++_shared.so]\n"
        " 0x0000000000000001 (NEEDED)             Shared library: [libdl.so]\n"
        " 0x000000000000000e (SONAME)             Library soname: [libapp.so]\n"
    )
    assert parse_required_libs(output) == {"libc++_shared.so", "libdl.so"}


def test_parse_required_libs_empty():
    assert parse_required_libs("no dynamic section") == set()


def test_load_requires_ndk_home():
    with pytest.raises(NdkError, match="NDK_HOME"):
        load_ndk_env({})


def test_load_rejects_missing_dir(tmp_path):
    with pytest.raises(NdkError, match="existing directory"):
        load_ndk_env({"NDK_HOME": str(tmp_path / "nope")})


def test_load_rejects_old_ndk(tmp_path):
    make_ndk(tmp_path, "18.1.5063045")
    with pytest.raises(NdkError, match="At least NDK"):
        load_ndk_env({"NDK_HOME": str(tmp_path)})


def test_load_without_source_props(tmp_path):
    with pytest.raises(NdkError, match="lookup version"):
        load_ndk_env({"NDK_HOME": str(tmp_path)})


def test_load_valid_ndk(tmp_path):
    make_ndk(tmp_path, "25.1.8937393")
    env = load_ndk_env({"NDK_HOME": str(tmp_path)})
    assert env.ndk_home == tmp_path
    assert env.version().triple.major == 25


def test_compiler_path_missing_then_present(tmp_path):
    env, bin_dir = make_ndk(tmp_path, "25.1.8937393")
    expected = bin_dir / f"aarch64-linux-android24-{ndk.CLANG}"
    with pytest.raises(MissingToolError) as info:
        env.compiler_path(Compiler.CLANG, "aarch64-linux-android", 24)
    assert info.value.tried_path == expected
    expected.write_text("")
    assert env.compiler_path(Compiler.CLANG, "aarch64-linux-android", 24) == expected


def test_tool_dir_missing(tmp_path):
    env = NdkEnv(tmp_path)
    with pytest.raises(MissingToolError) as info:
        env.tool_dir()
    assert info.value.name == "prebuilt toolchain"


def test_ar_path_new_ndk_uses_llvm(tmp_path):
    env, bin_dir = make_ndk(tmp_path, "25.1.8937393")
    (bin_dir / f"llvm-{ndk.AR}").write_text("")
    assert env.ar_path("aarch64-linux-android").name == f"llvm-{ndk.AR}"


def test_readelf_path_old_ndk_uses_triple(tmp_path):
    env, bin_dir = make_ndk(tmp_path, "21.4.7075529")
    (bin_dir / f"aarch64-linux-android-{ndk.READELF}").write_text("")
    path = env.readelf_path("aarch64-linux-android")
    assert path.name == f"aarch64-linux-android-{ndk.READELF}"


def test_libcxx_shared_path_new_ndk(tmp_path):
    env, bin_dir = make_ndk(tmp_path, "25.1.8937393")
    lib_dir = bin_dir.parent / "sysroot" / "usr" / "lib" / "arm-linux-androideabi"
    lib_dir.mkdir(parents=True)
    (lib_dir / "libc++_shared.so").write_text("")
    assert env.libcxx_shared_path(for_name("armv7")) == lib_dir / "libc++_shared.so"


def test_libcxx_shared_path_old_ndk(tmp_path):
    env, _ = make_ndk(tmp_path, "21.4.7075529")
    lib_dir = tmp_path / "sources" / "cxx-stl" / "llvm-libc++" / "libs" / "arm64-v8a"
    with pytest.raises(MissingToolError) as info:
        env.libcxx_shared_path(for_name("aarch64"))
    assert info.value.tried_path == lib_dir / "libc++_shared.so"
    lib_dir.mkdir(parents=True)
    (lib_dir / "libc++_shared.so").write_text("")
    assert env.libcxx_shared_path(for_name("aarch64")) == lib_dir / "libc++_shared.so"