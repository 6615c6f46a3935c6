import pathlib
import shutil

import pytest

import printdesk.document
import printdesk.errors
import printdesk.office
import printdesk.rasterize


Document = printdesk.document.Document
ConversionFailure = printdesk.errors.ConversionFailure
RenderingDegraded = printdesk.errors.RenderingDegraded


#============================================
def test_grayscale_command_flags() -> None:
	rasterizer = printdesk.rasterize.Rasterizer(gs_path="/opt/gs/bin/gs")
	command = rasterizer.build_grayscale_command(pathlib.Path("in.pdf"), pathlib.Path("out.pdf"))
	assert command[0] == "/opt/gs/bin/gs"
	assert "-sDEVICE=pdfwrite" in command
	assert "-sColorConversionStrategy=Gray" in command
	assert "-dProcessColorModel=/DeviceGray" in command
	assert "-sOutputFile=out.pdf" in command
	assert command[-1] == "in.pdf"


#============================================
def test_office_command_is_headless(tmp_path: pathlib.Path) -> None:
	converter = printdesk.office.OfficeConverter(soffice_path="lo")
	command = converter.build_command(tmp_path / "source.docx", tmp_path)
	assert command[:3] == ["lo", "--headless", "--norestore"]
	assert command[command.index("--convert-to") + 1] == "pdf"
	assert command[command.index("--outdir") + 1] == str(tmp_path)


#============================================
def test_missing_ghostscript_is_degraded(pdf_factory, a4) -> None:
	rasterizer = printdesk.rasterize.Rasterizer(gs_path="/nonexistent/bin/gs")
	with pytest.raises(RenderingDegraded):
		rasterizer.convert_to_grayscale(pdf_factory([a4]))


#============================================
def test_missing_soffice_is_conversion_failure() -> None:
	converter = printdesk.office.OfficeConverter(soffice_path="/nonexistent/bin/soffice")
	with pytest.raises(ConversionFailure) as info:
		converter.convert_to_pdf(b"hello", "docx")
	assert info.value.extension == "docx"
	assert "LibreOffice" in str(info.value)


#============================================
def test_render_first_page_size(pdf_factory, a4) -> None:
	"""
	72 dpi renders one pixel per point.
	"""
	rasterizer = printdesk.rasterize.Rasterizer()
	image = rasterizer.render_first_page(pdf_factory([a4]), 72)
	assert image.mode == "RGB"
	assert abs(image.width - a4[0]) <= 1
	assert abs(image.height - a4[1]) <= 1


#============================================
def test_render_garbage_is_degraded() -> None:
	rasterizer = printdesk.rasterize.Rasterizer()
	with pytest.raises(RenderingDegraded):
		rasterizer.render_first_page(b"this is not a pdf", 72)


#============================================
@pytest.mark.skipif(shutil.which("gs") is None, reason="Ghostscript not installed")
def test_ghostscript_grayscale_keeps_page_count(pdf_factory, a4) -> None:
	rasterizer = printdesk.rasterize.Rasterizer()
	gray_bytes = rasterizer.convert_to_grayscale(pdf_factory([a4, a4, a4]))
	assert Document.from_bytes(gray_bytes).page_count == 3


#============================================
@pytest.mark.skipif(shutil.which("soffice") is None, reason="LibreOffice not installed")
def test_soffice_converts_text_document() -> None:
	converter = printdesk.office.OfficeConverter()
	pdf_bytes = converter.convert_to_pdf(b"Hello printer\n", "txt")
	assert Document.from_bytes(pdf_bytes).page_count >= 1
