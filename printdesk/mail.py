"""
Deliver finished print PDFs to a mail-enabled printer.
"""

# Standard Library
import dataclasses
import email.message
import email.utils
import logging
import smtplib
import ssl

# local repo modules
import printdesk.config
import printdesk.errors


PrintOptions = printdesk.config.PrintOptions
Settings = printdesk.config.Settings
TransportFailure = printdesk.errors.TransportFailure

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class MailResult:
	success: bool
	message_id: str | None = None
	error: str | None = None


#============================================
def build_subject(file_name: str, options: PrintOptions, duplex: str | None = None) -> str:
	"""
	Build a mail subject that describes the print job.

	Args:
		file_name: Original upload name.
		options: Print options.
		duplex: Optional duplex description.

	Returns:
		Subject line.
	"""
	parts = [f"Print: {file_name}"]
	parts.append(f"Copies: {options.total_copies}")
	parts.append("Color: B&W" if options.grayscale else "Color: Color")
	if duplex:
		parts.append(f"Duplex: {duplex}")
	return " | ".join(parts)


#============================================
def attachment_name(file_name: str) -> str:
	if file_name.lower().endswith(".pdf"):
		return file_name
	return f"{file_name}.pdf"


#============================================
def build_message(
	pdf_bytes: bytes,
	file_name: str,
	subject: str,
	sender: str,
	recipient: str,
) -> email.message.EmailMessage:
	"""
	Build the print mail with the PDF attached.

	Args:
		pdf_bytes: Final PDF.
		file_name: Original upload name.
		subject: Subject line.
		sender: From address.
		recipient: Printer address.

	Returns:
		EmailMessage.
	"""
	message = email.message.EmailMessage()
	message["From"] = sender
	message["To"] = recipient
	message["Subject"] = subject
	message["Message-ID"] = email.utils.make_msgid()
	message.set_content(f"Print job: {file_name}")
	message.add_attachment(
		pdf_bytes,
		maintype="application",
		subtype="pdf",
		filename=attachment_name(file_name),
	)
	return message


#============================================
def deliver(message: email.message.EmailMessage, settings: Settings) -> None:
	"""
	Send a message through the configured SMTP relay.

	Port 465 uses implicit TLS, any other port upgrades with STARTTLS.
	"""
	if not settings.smtp_host:
		raise TransportFailure("SMTP_HOST is not configured")
	context = ssl.create_default_context()
	try:
		if settings.smtp_port == 465:
			with smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, context=context, timeout=settings.timeout) as client:
				if settings.smtp_user:
					client.login(settings.smtp_user, settings.smtp_password)
				client.send_message(message)
		else:
			with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=settings.timeout) as client:
				client.starttls(context=context)
				if settings.smtp_user:
					client.login(settings.smtp_user, settings.smtp_password)
				client.send_message(message)
	except (smtplib.SMTPException, OSError) as error:
		raise TransportFailure(str(error)) from error


#============================================
def send_print_email(
	pdf_bytes: bytes,
	file_name: str,
	options: PrintOptions,
	settings: Settings,
	duplex: str | None = None,
) -> MailResult:
	"""
	Mail a finished PDF to the printer.

	The PDF is sent unchanged, so a failed send can be retried with the
	same bytes.

	Args:
		pdf_bytes: Final PDF.
		file_name: Original upload name.
		options: Print options, used for the subject.
		settings: SMTP settings.
		duplex: Optional duplex description.

	Returns:
		MailResult.
	"""
	sender = settings.smtp_from or settings.smtp_user
	if not settings.printer_email:
		logger.error("PRINTER_EMAIL is not configured")
		return MailResult(success=False, error="PRINTER_EMAIL is not configured")
	subject = build_subject(file_name, options, duplex)
	message = build_message(pdf_bytes, file_name, subject, sender, settings.printer_email)
	try:
		deliver(message, settings)
	except TransportFailure as error:
		logger.error("Failed to send print email: %s", error)
		return MailResult(success=False, error=str(error))
	logger.info("Print email sent: %s", message["Message-ID"])
	return MailResult(success=True, message_id=message["Message-ID"])
