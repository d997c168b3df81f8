"""CLI for model-docgen."""

import argparse
import functools
import logging
import os
import sys
import time

from model_docgen.domain.constants import NO_CONTENT
from model_docgen.domain.models import GenerateOptions, GenerateResult
from model_docgen.error_report import build_failure_report, format_failure_report
from model_docgen.factory_registry import FactoryRegistry
from model_docgen.introspection.loader import ModelLoadError, load_model
from model_docgen.introspection.model import ModelDocument
from model_docgen.nodes.base_node import DocumentationNode
from model_docgen.nodes.object_node import ObjectDocumentationNode
from model_docgen.output.artifacts import OutputFolder
from model_docgen.output.site_builder import SiteBuilder

logger = logging.getLogger(__name__)


def build_registry(options: GenerateOptions) -> FactoryRegistry:
    """Registry with plugin factories and ``--factory`` specs registered."""
    registry = FactoryRegistry()
    if options.render_unset:
        registry.default_factory = functools.partial(ObjectDocumentationNode, render_unset=True)
    if options.use_entry_points:
        registry.load_entry_points()
    registry.register_specs(options.factory_specs)
    return registry


def build_tree(document: ModelDocument, registry: FactoryRegistry,
               title: str | None = None) -> DocumentationNode:
    """Root holder node with one resolved child per model root."""
    root = DocumentationNode(title or document.name or 'Documentation')
    for obj in document.roots:
        node = registry.resolve(obj)
        if node is not None:
            root.add_child(node)
    return root


def generate_site(model_path: str, output_dir: str, options: GenerateOptions) -> GenerateResult:
    """Main orchestration: model file -> documentation tree -> static site."""
    start_time = time.time()

    document = load_model(model_path, restrict_icons=options.restrict_icons)
    registry = build_registry(options)
    root = build_tree(document, registry, options.title)

    doc_folder = OutputFolder()
    builder = SiteBuilder(root, pretty=options.pretty)
    index = builder.assemble(doc_folder, title=options.title)
    written = doc_folder.write(output_dir, overwrite=options.overwrite)

    logger.info("Generated %s in %.2fs", output_dir, time.time() - start_time)
    return GenerateResult(
        nodes=len(index.id_map),
        pages=sum(1 for target in index.id_map.values() if target != NO_CONTENT),
        icons=builder.icon_manager.stored_count,
        output_dir=output_dir,
        files_written=len(written),
    )


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog='model-docgen', description='Model documentation site generator')
    parser.add_argument('-v', '--verbose', action='count', default=0, help='Log progress (-vv for debug)')
    subparsers = parser.add_subparsers(dest='command')

    # generate command
    gen_parser = subparsers.add_parser('generate', help='Generate a documentation site from a JSON model')
    gen_parser.add_argument('model', help='Path to the JSON model file')
    gen_parser.add_argument('output', help='Output directory')
    gen_parser.add_argument('--title', help='Site title (default: model name)')
    gen_parser.add_argument('--factory', action='append', default=[], metavar='SPEC',
                            help="Register a factory: 'namespace[#Type]=module:attribute' (repeatable)")
    gen_parser.add_argument('--no-entry-points', action='store_true', help='Ignore installed factory plugins')
    gen_parser.add_argument('--render-unset', action='store_true', help='Render properties that are not set')
    gen_parser.add_argument('--no-overwrite', action='store_true', help='Keep files that already exist')
    gen_parser.add_argument('--pretty', action='store_true', help='Indent the JSON in toc.js')
    gen_parser.add_argument('--restrict-icons', action='store_true',
                            help='Only copy icons located under the model directory')

    # factories command
    fac_parser = subparsers.add_parser('factories', help='List registered factories in dispatch order')
    fac_parser.add_argument('--factory', action='append', default=[], metavar='SPEC')
    fac_parser.add_argument('--no-entry-points', action='store_true')

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == 'generate':
        if not os.path.isfile(args.model):
            print(f"Error: {args.model} not found", file=sys.stderr)
            return 1

        options = GenerateOptions(
            title=args.title,
            render_unset=args.render_unset,
            overwrite=not args.no_overwrite,
            use_entry_points=not args.no_entry_points,
            factory_specs=args.factory,
            pretty=args.pretty,
            restrict_icons=args.restrict_icons,
        )

        print(f"Generating documentation for {args.model}...")
        try:
            result = generate_site(args.model, args.output, options)
        except ModelLoadError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except Exception as e:
            print(format_failure_report(build_failure_report(e)), file=sys.stderr)
            return 1
        print(f"Done! {result.nodes} nodes, {result.pages} pages, {result.icons} icons")
        print(f"Output: {result.output_dir}")

    elif args.command == 'factories':
        registry = build_registry(GenerateOptions(
            use_entry_points=not args.no_entry_points,
            factory_specs=args.factory,
        ))
        for entry in registry.entries():
            print(f"  {entry.describe()}")

    else:
        parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
