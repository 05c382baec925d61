from docaudit.analysis.analyzer import DocumentAnalyzer
from docaudit.analysis.cross_analyzer import CrossDocumentAnalyzer
from docaudit.analysis.factory import AnalyzerFactory

__all__ = ["AnalyzerFactory", "CrossDocumentAnalyzer", "DocumentAnalyzer"]
