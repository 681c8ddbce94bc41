"""
Document requirement registry tests.
"""

from src.core.entities.carrier import CarrierType
from src.infrastructure.rules.document_requirements import StaticRequirementRegistry
from tests.factories import ENTERPRISE_DOCS, SOLO_DOCS


class TestStaticRequirementRegistry:

    def setup_method(self):
        self.registry = StaticRequirementRegistry()

    def test_solo_requirements_in_review_order(self):
        reqs = self.registry.requirements_for(CarrierType.SOLO)
        assert [r.document_type for r in reqs] == SOLO_DOCS
        assert [r.display_priority for r in reqs] == list(range(1, 8))

    def test_enterprise_requirements_in_review_order(self):
        reqs = self.registry.requirements_for("enterprise")
        assert [r.document_type for r in reqs] == ENTERPRISE_DOCS

    def test_legacy_types_are_not_required(self):
        types = {r.document_type for r in self.registry.requirements_for(CarrierType.SOLO)}
        assert "other" not in types
        assert self.registry.priority_for(CarrierType.SOLO, "other") is not None

    def test_aliases_and_variants_resolve_to_canonical(self):
        assert self.registry.canonical_type("Aadhar") == "aadhaar_card"
        assert self.registry.canonical_type("rc") == "registration_certificate"
        assert self.registry.canonical_type("rent_agreement") == "address_proof"
        assert self.registry.canonical_type("electricity_bill") == "address_proof"

    def test_unknown_type_has_no_priority(self):
        assert self.registry.priority_for(CarrierType.ENTERPRISE, "board_resolution") is None
        assert self.registry.priority_for(CarrierType.SOLO, "pan_card") is None

    def test_variant_shares_priority_of_its_requirement(self):
        assert self.registry.priority_for(CarrierType.ENTERPRISE, "office_photo_with_board") == 3

    def test_labels(self):
        assert self.registry.label_for("gstin_certificate") == "GST Certificate"
        assert self.registry.label_for("rent_agreement") == "Rent Agreement"
        assert self.registry.label_for("board_resolution") == "Board Resolution"

    def test_missing_types(self):
        missing = self.registry.missing_types(CarrierType.ENTERPRISE, ["pan_card", "gst_certificate", "rent_agreement"])
        assert missing == ["incorporation_certificate", "trade_license", "tan_certificate"]
        assert self.registry.missing_types(CarrierType.SOLO, SOLO_DOCS) == []

    def test_accepted_formats(self):
        reqs = {r.document_type: r for r in self.registry.requirements_for(CarrierType.SOLO)}
        assert "pdf" in reqs["permit"].formats_accepted

    def test_requirement_for_resolves_variants_and_aliases(self):
        req = self.registry.requirement_for(CarrierType.ENTERPRISE, "electricity_bill")
        assert req.document_type == "address_proof"
        assert self.registry.requirement_for(CarrierType.SOLO, "Aadhar").display_priority == 1
        assert self.registry.requirement_for(CarrierType.SOLO, "pan_card") is None

    def test_formats_for(self):
        assert self.registry.formats_for(CarrierType.SOLO, "fleet_proof") == ("jpg", "jpeg", "png")
        assert self.registry.formats_for(CarrierType.ENTERPRISE, "board_resolution") == ("pdf", "jpg", "jpeg", "png")
