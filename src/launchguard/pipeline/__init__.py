"""Pipeline — конвейер допуска переводов (экземпляр контракта)."""

from .transfer_admission import TransferAdmissionPipeline

__all__ = ["TransferAdmissionPipeline"]
