# src/repodigest/cli.py
import sys
import argparse
import logging
import os
import tempfile
from pathlib import Path
from typing import List

from repodigest import config
from repodigest.acquire import clone_repository, is_valid_github_url, repo_name_from_url
from repodigest.core.ignore import load_ignore_spec
from repodigest.core.languages import detect_languages
from repodigest.core.packer import check_batch_budget, pack
from repodigest.core.rules import Rule
from repodigest.core.scanner import scan
from repodigest.core.tree import build_file_tree, render_file_tree
from repodigest.errors import RepoDigestError
from repodigest.models import Batch, FileRecord, ScanPolicy
from repodigest.pipeline import render_batch
from repodigest.utils.tokenizer import Tokenizer


def create_arg_parser():
    parser = argparse.ArgumentParser(
        description="Select the most relevant files of a repository and pack them into token-bounded batches for LLM summarization."
    )
    parser.add_argument("root_dir", type=str, nargs="?", default=os.getcwd(), help="Project root directory or GitHub repository URL")
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output filename (default: {folder_name}_digest.txt)"
    )
    parser.add_argument("--clone-dir", type=str, default=None, help="Where to clone URL targets (default: a temp directory)")
    parser.add_argument("-k", "--top", type=int, default=config.TOP_FILES_CAPACITY, help="Number of files to keep")
    parser.add_argument("--all", action="store_true", help="Keep every matching file instead of the top K")
    parser.add_argument("--max-tokens", type=int, default=config.DEFAULT_MAX_TOKENS_PER_BATCH, help="Token budget per batch")
    parser.add_argument("--max-file-size", type=int, default=config.MAX_FILE_SIZE_BYTES, help="Skip files larger than this many bytes")
    parser.add_argument("--max-depth", type=int, default=None, help="Do not descend deeper than this")
    parser.add_argument("--ignore-file", type=str, default=None, help=f"gitignore-style rules (default: {config.DEFAULT_IGNORE_FILE} in root)")
    parser.add_argument("--priority", action="append", default=[], metavar="RULE", help="Extra priority name (literal, glob, or re:<regex>)")
    parser.add_argument("--skip", action="append", default=[], metavar="RULE", help="Extra skipped file name (literal, glob, or re:<regex>)")
    parser.add_argument("--exact-tokens", action="store_true", help="Report tiktoken counts next to the estimates")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def get_default_output_name(root_dir: Path) -> str:
    """Generates a dynamic filename based on the directory name."""
    folder_name = root_dir.name or "project"
    safe_name = folder_name.replace(" ", "_")
    return f"{safe_name}_digest.txt"


def build_policy(args, root_dir: Path, output_file_name: str) -> ScanPolicy:
    ignore_file = Path(args.ignore_file) if args.ignore_file else root_dir / config.DEFAULT_IGNORE_FILE
    ignore_spec = load_ignore_spec(ignore_file, extra_patterns=[output_file_name], required=bool(args.ignore_file))
    defaults = ScanPolicy.default()
    return ScanPolicy(
        priority_names=defaults.priority_names + tuple(Rule.parse(r) for r in args.priority),
        skip_names=defaults.skip_names + tuple(Rule.parse(r) for r in args.skip),
        max_file_size_bytes=args.max_file_size,
        max_depth=args.max_depth,
        ignore_spec=ignore_spec,
    ).validate()


def print_selection(files: List[FileRecord], exact: bool) -> None:
    print("\n--- Selected Files (by score) ---")
    print(f"{'Rank':<5} | {'Score':<8} | {'Tokens':<10} | {'File Path'}")
    print("-" * 60)
    for i, f in enumerate(files):
        tokens = f"{f.token_count}" + (f" ({Tokenizer.count(f.content)})" if exact else "")
        marker = " *" if f.priority else ""
        print(f"{i+1:<5} | {f.score:<8.2f} | {tokens:<10} | {f.path}{marker}")
    print("-" * 60)


def print_batches(batches: List[Batch], max_tokens: int) -> None:
    print(f"\n--- Batches (budget {max_tokens} tokens) ---")
    for i, b in enumerate(batches):
        note = " [oversized]" if b.is_oversized(max_tokens) else ""
        print(f"Batch {i+1}: {len(b)} files, {b.token_count} tokens{note}")
    print("-" * 60)


def main():
    try:
        # 1. Setup
        parser = create_arg_parser()
        args = parser.parse_args()

        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )
        check_batch_budget(args.max_tokens)

        if is_valid_github_url(args.root_dir):
            clone_parent = Path(args.clone_dir) if args.clone_dir else Path(tempfile.mkdtemp(prefix="repodigest-"))
            print(f"Cloning:  {args.root_dir}")
            root_dir = clone_repository(args.root_dir, clone_parent)
            # Clones land in a throwaway directory; write the digest here instead
            output_dir = Path.cwd()
            root_label = repo_name_from_url(args.root_dir)
            default_name = get_default_output_name(Path(root_label))
        else:
            root_dir = Path(args.root_dir).resolve()
            if not root_dir.is_dir():
                print(f"Error: Invalid directory '{root_dir}'", file=sys.stderr)
                sys.exit(1)
            output_dir = root_dir
            root_label = root_dir.name
            default_name = get_default_output_name(root_dir)

        output_file_name = args.output or default_name
        output_file = output_dir / output_file_name

        policy = build_policy(args, root_dir, output_file_name)
        capacity = None if args.all else args.top

        print(f"--- repodigest ---")
        print(f"Scanning: {root_dir}")
        print(f"Output:   {output_file.name}")
        print(f"Mode:     {'All matching files' if capacity is None else f'Top {capacity} files'}")

        # 2. Scanning and selection
        files = scan(root_dir, policy, capacity)
        if not files:
            print("No matching files found.")
            return

        # 3. Packing
        batches = pack(files, args.max_tokens)

        # 4. Review & Stats
        print_selection(files, args.exact_tokens)
        print_batches(batches, args.max_tokens)
        total_tokens = sum(f.token_count for f in files)
        tree_nodes = build_file_tree(root_dir)
        languages = detect_languages(tree_nodes)
        print(f"Total files: {len(files)}")
        print(f"Total tokens (est.): {total_tokens}")
        print(f"Languages: {', '.join(languages) or 'unknown'}")
        print("-" * 60)

        # 5. Output Generation
        tree_str = render_file_tree(tree_nodes, root_label)

        try:
            with open(output_file, "w", encoding="utf-8") as f:
                f.write(f"# --- repodigest ---\n")
                f.write(f"# Files: {len(files)} | Tokens: {total_tokens} | Batches: {len(batches)}\n")
                f.write(f"# --- Project Tree ---\n")
                f.write(tree_str)

                for i, batch in enumerate(batches):
                    f.write(f"\n# --- Batch {i+1}/{len(batches)} ({batch.token_count} tokens) ---\n\n")
                    f.write(render_batch(batch))
                    f.write("\n")
            print(f"\nSuccess! Digest written to: {output_file.name}")

        except IOError as e:
            print(f"Error writing file: {e}", file=sys.stderr)
            sys.exit(1)

    except KeyboardInterrupt:
        print("\nCancelled.")
        sys.exit(1)

    except RepoDigestError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    except Exception as e:
        print(f"An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
