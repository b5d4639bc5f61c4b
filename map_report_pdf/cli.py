"""
CLI entry points for printing a map report PDF.
"""

# Standard Library
import argparse
import io
import json
import logging
import pathlib
import time

# PIP3 modules
import pypdf

# local repo modules
import map_report_pdf as mrp
import map_report_pdf.assembler
import map_report_pdf.config
import map_report_pdf.content
import map_report_pdf.errors
import map_report_pdf.images
import map_report_pdf.legend


DocumentOptions = mrp.config.DocumentOptions
FontAssets = mrp.config.FontAssets
LegendConfig = mrp.config.LegendConfig
LegendGroup = mrp.legend.LegendGroup
LegendItem = mrp.legend.LegendItem
LegendRow = mrp.legend.LegendRow

DEFAULT_FORMAT = mrp.config.DEFAULT_FORMAT
DEFAULT_ORIENTATION = mrp.config.DEFAULT_ORIENTATION
PAGE_FORMATS = mrp.config.PAGE_FORMATS
ORIENTATIONS = mrp.config.ORIENTATIONS
SAME_AS_MAP = mrp.config.SAME_AS_MAP
PRODUCER = "map-report-pdf"


#============================================
def load_job(job_path: str | None) -> dict:
	"""
	Load a JSON job file.

	Args:
		job_path: Path to the job file, or None for an empty job.

	Returns:
		Job dict.
	"""
	if job_path is None:
		return {}
	with open(job_path, "r", encoding="utf-8") as handle:
		job = json.load(handle)
	if not isinstance(job, dict):
		raise mrp.errors.LayoutConfigError(f"Job file must hold a JSON object: {job_path}")
	return job


#============================================
def resolve_job_path(value, base_dir: pathlib.Path):
	"""
	Resolve a relative file reference against the job file directory.

	Args:
		value: Path string, data URI or markup.
		base_dir: Directory of the job file.

	Returns:
		Resolved path string, or the value unchanged.
	"""
	if not isinstance(value, str):
		return value
	if value.startswith("data:") or value.lstrip().startswith("<"):
		return value
	path = pathlib.Path(value)
	if not path.is_absolute():
		path = base_dir / path
	return str(path)


#============================================
def build_legend_groups(entries: list[dict], base_dir: pathlib.Path) -> list[LegendGroup]:
	"""
	Build legend groups from job entries.

	Args:
		entries: Group dicts with "title" and "items".
		base_dir: Directory of the job file.

	Returns:
		List of LegendGroup.
	"""
	groups: list[LegendGroup] = []
	for entry in entries:
		items: list[LegendItem] = []
		for item_entry in entry.get("items", []):
			rows = []
			for row_entry in item_entry.get("rows", []):
				image = row_entry.get("image")
				if image and "src" in image:
					image = dict(image, src=resolve_job_path(image["src"], base_dir))
				rows.append(
					LegendRow(
						kind=row_entry["kind"],
						title=row_entry.get("title", ""),
						stroke=row_entry.get("stroke"),
						fill=row_entry.get("fill"),
						image=image,
					)
				)
			items.append(
				LegendItem(
					kind=item_entry["kind"],
					src=resolve_job_path(item_entry.get("src"), base_dir),
					rows=rows,
					col_nr=item_entry.get("col_nr"),
				)
			)
		groups.append(LegendGroup(title=entry.get("title", ""), items=items))
	return groups


#============================================
def build_options(args: argparse.Namespace, job: dict, capture) -> DocumentOptions:
	"""
	Build document options from CLI args and the job file.

	CLI values win over job values.

	Args:
		args: Parsed argparse namespace.
		job: Job dict.
		capture: Decoded map image.

	Returns:
		DocumentOptions.
	"""
	base_dir = pathlib.Path(args.job_path).resolve().parent if args.job_path else pathlib.Path.cwd()
	page_format = args.page_format or job.get("format", DEFAULT_FORMAT)
	orientation = args.orientation or job.get("orientation", DEFAULT_ORIENTATION)

	contact = None
	if job.get("contact"):
		contact = mrp.content.format_contact_info(job["contact"])
	map_info = None
	if "center" in job:
		center = tuple(job["center"]) if job["center"] is not None else None
		map_info = mrp.content.format_map_info(center)

	logo_source = args.logo_path or resolve_job_path(job.get("logo"), base_dir)

	fonts = None
	if job.get("fonts"):
		font_entry = job["fonts"]
		fonts = FontAssets(
			name=font_entry["name"],
			regular=resolve_job_path(font_entry["regular"], base_dir),
			bold=resolve_job_path(font_entry["bold"], base_dir),
		)

	legend = job.get("legend") or {}
	legend_config = LegendConfig(
		format=legend.get("format", SAME_AS_MAP),
		orientation=legend.get("orientation", SAME_AS_MAP),
	)

	return DocumentOptions(
		orientation=orientation,
		format=page_format,
		img_ratio=capture.aspect_ratio,
		title=job.get("title"),
		logo=logo_source,
		description=job.get("description"),
		contact=contact,
		map_info=map_info,
		copyright=mrp.content.build_copyright(job.get("attributions", [])),
		legend_config=legend_config,
		legend_groups=build_legend_groups(legend.get("groups", []), base_dir),
		fonts=fonts,
		style_overrides=job.get("style"),
	)


#============================================
def write_pdf(pdf_bytes: bytes, output_path: pathlib.Path, title: str | None) -> int:
	"""
	Write the PDF with document metadata.

	Args:
		pdf_bytes: Rendered PDF.
		output_path: Output path.
		title: Document title or None.

	Returns:
		Number of pages written.
	"""
	reader = pypdf.PdfReader(io.BytesIO(pdf_bytes))
	writer = pypdf.PdfWriter()
	for page in reader.pages:
		writer.add_page(page)
	metadata = {"/Producer": PRODUCER}
	if title:
		metadata["/Title"] = title
	writer.add_metadata(metadata)
	output_path.parent.mkdir(parents=True, exist_ok=True)
	with open(output_path, "wb") as handle:
		writer.write(handle)
	return len(reader.pages)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Optional argument list, defaults to sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Print a map image with its report elements to PDF.")
	parser.add_argument("job_path", nargs="?", default=None, help="JSON job file.")

	input_group = parser.add_argument_group("Input")
	input_group.add_argument("-i", "--image", dest="image_path", required=True, help="Captured map image.")
	input_group.add_argument("-l", "--logo", dest="logo_path", default=None, help="Logo image, overrides the job.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", required=True, help="Output PDF path.")
	output_group.add_argument(
		"-f", "--format", dest="page_format", choices=sorted(PAGE_FORMATS), default=None,
		help="Page format, overrides the job.",
	)
	output_group.add_argument(
		"-r", "--orientation", dest="orientation", choices=ORIENTATIONS, default=None,
		help="Page orientation, overrides the job.",
	)

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument("-v", "--verbose", dest="verbose", action="store_true", help="Enable debug logging.")
	parser.set_defaults(verbose=False)

	args = parser.parse_args(argv)
	return args


#============================================
def run_pipeline(args: argparse.Namespace) -> int:
	"""
	Lay out and draw the report.

	Args:
		args: Parsed argparse namespace.

	Returns:
		Number of pages written.
	"""
	print("Map report pipeline")
	print(f"Map image: {args.image_path}")
	print(f"Output PDF: {args.output_path}")
	if args.job_path:
		print(f"Job file: {args.job_path}")

	start_time = time.perf_counter()
	job = load_job(args.job_path)
	capture = mrp.images.decode_image(args.image_path)
	options = build_options(args, job, capture)
	print(f"Page: {options.format} {options.orientation}")

	setup_start = time.perf_counter()
	assembler = mrp.assembler.DocumentAssembler()
	layout = assembler.setup(options, notify=print)
	setup_end = time.perf_counter()
	print(f"Elements placed: {', '.join(layout.placements())}")
	print(f"Legend groups: {len(assembler.legend_groups)}")

	draw_start = time.perf_counter()
	pdf_bytes = assembler.draw(capture)
	draw_end = time.perf_counter()

	pages = write_pdf(pdf_bytes, pathlib.Path(args.output_path), options.title)
	print(f"Pages written: {pages}")
	print(f"Legend elements: {len(assembler.legend_records)}")
	total_time = time.perf_counter() - start_time
	print(
		"Timing: setup={:.2f}s draw={:.2f}s total={:.2f}s".format(
			setup_end - setup_start,
			draw_end - draw_start,
			total_time,
		)
	)
	return pages


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	level = logging.DEBUG if args.verbose else logging.WARNING
	logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
	run_pipeline(args)
