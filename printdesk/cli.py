"""
CLI entry points for building print-ready PDFs.
"""

# Standard Library
import argparse
import logging
import pathlib
import sys
import time

# local repo modules
import printdesk.config
import printdesk.convert
import printdesk.errors
import printdesk.mail
import printdesk.office
import printdesk.pipeline
import printdesk.preview
import printdesk.rasterize


PrintOptions = printdesk.config.PrintOptions
PrintDeskError = printdesk.errors.PrintDeskError
UnsupportedFormat = printdesk.errors.UnsupportedFormat

IMAGE_EXTENSIONS = printdesk.config.IMAGE_EXTENSIONS
MAX_SOURCE_IMAGES = printdesk.config.MAX_SOURCE_IMAGES
PREVIEW_UNAVAILABLE = printdesk.config.PREVIEW_UNAVAILABLE
file_extension = printdesk.config.file_extension


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Optional argument list, defaults to sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Build a print-ready A4 PDF from documents or images.")
	parser.add_argument("inputs", nargs="+", help="Document, PDF, or one or more image files.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", required=True, help="Output PDF path.")
	output_group.add_argument("-p", "--preview", dest="preview_path", default=None, help="Write a JPEG preview of page 1.")
	output_group.add_argument("-s", "--send", dest="send", action="store_true", help="Mail the PDF to PRINTER_EMAIL.")

	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument("-n", "--pages-per-sheet", dest="pages_per_sheet", type=int, choices=(1, 2, 4), default=1, help="Pages per sheet.")
	layout_group.add_argument("-k", "--copies-per-page", dest="copies_per_page", type=int, default=1, help="Consecutive copies of every page.")
	layout_group.add_argument("-c", "--copies", dest="total_copies", type=int, default=1, help="Copies of the whole document.")
	layout_group.add_argument("-g", "--grayscale", dest="grayscale", action="store_true", help="Print in black and white.")
	layout_group.add_argument("-G", "--color", dest="grayscale", action="store_false", help="Print in color.")

	parser.add_argument("-v", "--verbose", dest="verbose", action="store_true", help="Debug logging.")
	parser.set_defaults(grayscale=False, send=False, verbose=False)

	args = parser.parse_args(argv)
	return args


#============================================
def build_options(args: argparse.Namespace) -> PrintOptions:
	"""
	Build print options from CLI args.

	Image inputs are passed as source paths so they are rebuilt from the
	originals; any other input must be a single file.

	Args:
		args: Parsed argparse namespace.

	Returns:
		PrintOptions.
	"""
	paths = [pathlib.Path(value) for value in args.inputs]
	all_images = all(file_extension(path.name) in IMAGE_EXTENSIONS for path in paths)
	if len(paths) > 1 and not all_images:
		raise UnsupportedFormat("several inputs must all be images")
	if len(paths) > MAX_SOURCE_IMAGES:
		raise UnsupportedFormat(f"at most {MAX_SOURCE_IMAGES} images per request")
	source_paths: tuple[str, ...] = ()
	if all_images:
		source_paths = tuple(str(path) for path in paths)
	return PrintOptions(
		pages_per_sheet=args.pages_per_sheet,
		copies_per_page=args.copies_per_page,
		grayscale=args.grayscale,
		total_copies=args.total_copies,
		source_paths=source_paths,
		file_name=paths[0].name,
	)


#============================================
def run_cli(args: argparse.Namespace) -> int:
	"""
	Run the pipeline for parsed arguments.

	Args:
		args: Parsed argparse namespace.

	Returns:
		Process exit code.
	"""
	settings = printdesk.config.load_settings()
	office_converter = printdesk.office.OfficeConverter(settings.soffice_path, settings.timeout)
	rasterizer = printdesk.rasterize.Rasterizer(settings.gs_path, settings.timeout)

	print("Print request pipeline")
	print(f"Output PDF: {args.output_path}")
	print(f"Pages per sheet: {args.pages_per_sheet}")
	print(f"Copies per page: {args.copies_per_page}")
	print(f"Copies: {args.total_copies}")
	print(f"Grayscale: {args.grayscale}")

	start_time = time.perf_counter()
	try:
		options = build_options(args)
		data = b""
		if not options.source_paths:
			data = printdesk.convert.read_source_file(args.inputs[0])
		result = printdesk.pipeline.run_pipeline(data, options, office_converter, rasterizer)
	except UnsupportedFormat as error:
		print(f"Error: {error}")
		print(f"Supported formats:\n{error.supported_formats}")
		return 1
	except PrintDeskError as error:
		print(f"Error: {error}")
		return 1
	pipeline_time = time.perf_counter() - start_time

	output_path = pathlib.Path(args.output_path)
	output_path.write_bytes(result.pdf_bytes)
	print(f"Pages written: {result.page_count}")

	if args.preview_path:
		preview_bytes = printdesk.preview.render_first_page_thumbnail(result.pdf_bytes, rasterizer)
		if preview_bytes == PREVIEW_UNAVAILABLE:
			print("Preview unavailable")
		else:
			pathlib.Path(args.preview_path).write_bytes(preview_bytes)
			print(f"Preview written: {args.preview_path}")

	if args.send:
		mail_result = printdesk.mail.send_print_email(result.pdf_bytes, options.file_name, options, settings)
		if not mail_result.success:
			print(f"Send failed: {mail_result.error}")
			print(f"The PDF was kept at {output_path}; run again with --send to retry.")
			return 1
		print(f"Sent to printer: {mail_result.message_id}")

	total_time = time.perf_counter() - start_time
	print("Timing: pipeline={:.2f}s total={:.2f}s".format(pipeline_time, total_time))
	return 0


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	level = logging.DEBUG if args.verbose else logging.WARNING
	logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
	sys.exit(run_cli(args))


if __name__ == "__main__":
	main()
