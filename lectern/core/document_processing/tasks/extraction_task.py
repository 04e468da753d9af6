"""
Text extraction task.

Turns a stored upload into plain text:
- plain text files are read directly
- PDFs go through PyPDFLoader (falling back to the multimodal model when the
  PDF has no text layer)
- DOCX files go through Docx2txtLoader
- images, audio, video and other formats are sent inline to a Gemini
  multimodal model with a document-parser prompt

Dependencies: langchain_community.document_loaders, langchain_core, langchain_google_genai
System role: First stage of document ingestion pipeline
"""

import base64
import logging
from pathlib import Path

from langchain_community.document_loaders import Docx2txtLoader, PyPDFLoader
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_core.output_parsers import StrOutputParser

from lectern.core.document_processing.file_types import file_extension, guess_mime_type
from lectern.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)

PLAIN_TEXT_EXTENSIONS = {"txt", "md", "markdown", "csv"}

EXTRACTION_PROMPT = (
    "You are a document parser. Extract all text content from the attached file. "
    "Preserve the reading order and structure (headings, lists, tables rendered as plain text). "
    "For audio or video, transcribe the spoken content. "
    "Return only the extracted text, without commentary."
)


class ExtractionTask:
    """Extract plain text from uploaded files."""

    def __init__(self, model: BaseChatModel | None = None) -> None:
        """
        Initialize extraction task.

        Args:
            model: Multimodal chat model for non-text formats; those formats
                are rejected when None
        """
        self._model = model

    def extract(self, file_path: str, file_name: str | None = None) -> str:
        """
        Extract text from a stored file.

        Args:
            file_path: Path of the stored upload
            file_name: Original filename used for type detection (defaults to file_path)

        Returns:
            str: Extracted text (may be empty)

        Raises:
            ExtractionError: When the file is missing, unsupported or unreadable
        """
        path = Path(file_path)
        name = file_name or path.name
        extension = file_extension(name)

        if not path.exists():
            raise ExtractionError(f"File not found: {file_path}", file_type=extension)

        logger.info(
            f"{__name__}:extract - Extracting text",
            extra={"file_name": name, "file_type": extension},
        )

        try:
            if extension in PLAIN_TEXT_EXTENSIONS:
                return path.read_text(encoding="utf-8", errors="replace")
            if extension == "pdf":
                text = self._extract_pdf(path)
                if text.strip() or self._model is None:
                    return text
                logger.info(f"{__name__}:extract - PDF has no text layer, using multimodal model")
                return self._extract_with_model(path, name)
            if extension == "docx":
                return self._load_text(Docx2txtLoader(str(path)))
            return self._extract_with_model(path, name)
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(
                f"Failed to extract text from {name}: {e}",
                file_type=extension,
            ) from e

    def _extract_pdf(self, path: Path) -> str:
        return self._load_text(PyPDFLoader(str(path)))

    @staticmethod
    def _load_text(loader) -> str:
        documents = loader.load()
        return "\n\n".join(doc.page_content for doc in documents)

    def _extract_with_model(self, path: Path, name: str) -> str:
        if self._model is None:
            raise ExtractionError(
                f"Unsupported file type for text extraction: {name}",
                file_type=file_extension(name),
            )

        mime_type = guess_mime_type(name)
        encoded = base64.b64encode(path.read_bytes()).decode("utf-8")
        if mime_type.startswith("image/"):
            attachment = {"type": "image_url", "image_url": f"data:{mime_type};base64,{encoded}"}
        else:
            attachment = {"type": "media", "mime_type": mime_type, "data": encoded}

        message = HumanMessage(content=[{"type": "text", "text": EXTRACTION_PROMPT}, attachment])
        chain = self._model | StrOutputParser()
        return chain.invoke([message])
