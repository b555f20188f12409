import argparse, os, sys
from .archive import ArchiveReadError
from .classfile import ClassFormatError
from .config import ConfigError, load_config, resolve_classpath
from .introspect import TypeNotFoundError
from .renderer import write_manifest
from .scanner import GenerationError, scan_classpath
from .utils import find_repo_root
from .walker import ClasspathNotFoundError

CONFIG_ERRORS = (ConfigError, ClasspathNotFoundError, ArchiveReadError, ClassFormatError, TypeNotFoundError)


def main(argv=None):
    parser = argparse.ArgumentParser(prog="classnames", description="Serializable class manifest generator")
    sub = parser.add_subparsers(dest="cmd", required=True)

    gen = sub.add_parser("generate", help="Scan the classpath and write classnames.properties")
    gen.add_argument("base_path", nargs="?", default=None, help="Resources directory the manifest is written under")
    gen.add_argument("--classpath", action="append", default=[], help="Directory or .jar to scan (repeatable)")
    gen.add_argument("--package", action="append", default=[], help="Governed package prefix (repeatable)")
    gen.add_argument("--config", default=None, help="Config file (default: <repo>/.classnames.yml)")
    gen.add_argument("--quiet", action="store_true", help="Suppress progress output")

    args = parser.parse_args(argv)
    verbose = not args.quiet

    repo_root = find_repo_root(os.getcwd())
    try:
        cfg = load_config(repo_root, args.config)
        if args.package:
            cfg.data["packages"] = list(args.package)
        roots = resolve_classpath(cfg, args.classpath)
        result = scan_classpath(roots, cfg, verbose=verbose)
        base_path = args.base_path or os.path.join(repo_root, cfg.data["base_path"])
        write_manifest(result.classes, base_path, cfg.data["file_path"], cfg.data["header"], verbose=verbose)
    except GenerationError as e:
        print(str(e), file=sys.stderr)
        return 1
    except CONFIG_ERRORS as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
