"""
Static FHIR tables backing the type registry.

SHARED_DATA applies to every FHIR version; VERSION_DATA holds the tables
that differ between STU3 and R4. Resource type lists are kept sorted.
"""

from fhirq.models import GlobalParameter, PrefixOperator


SHARED_DATA = {
	"modifiers": {
		"string": ["exact", "contains", "missing", "text"],
		"token": ["text", "not", "above", "below", "in", "not-in", "missing"],
		"reference": ["missing", "type"],
		"date": ["missing"],
		"number": ["missing"],
		"quantity": ["missing"],
		"uri": ["above", "below", "missing"],
	},

	# Order is significant: equality, ordering, temporal, approximate
	"prefix_operators": [
		PrefixOperator("eq", "Equals", "Equal to value"),
		PrefixOperator("ne", "Not Equals", "Not equal to value"),
		PrefixOperator("gt", "Greater Than", "Greater than value"),
		PrefixOperator("lt", "Less Than", "Less than value"),
		PrefixOperator("ge", "Greater or Equal", "Greater than or equal to value"),
		PrefixOperator("le", "Less or Equal", "Less than or equal to value"),
		PrefixOperator("sa", "Starts After", "Starts after value (date)"),
		PrefixOperator("eb", "Ends Before", "Ends before value (date)"),
		PrefixOperator("ap", "Approximately", "Approximately equal to value"),
	],

	"global_parameters": [
		GlobalParameter("_id", "token", "Logical id of the resource"),
		GlobalParameter("_lastUpdated", "date", "When the resource was last updated"),
		GlobalParameter("_tag", "token", "Tags applied to the resource"),
		GlobalParameter("_profile", "uri", "Profiles the resource claims to conform to"),
		GlobalParameter("_security", "token", "Security labels applied to the resource"),
		GlobalParameter("_text", "string", "Search on the narrative of the resource"),
		GlobalParameter("_content", "string", "Search on the entire content of the resource"),
		GlobalParameter("_list", "string", "Search for resources in a specified list"),
		GlobalParameter("_has", "string", "Reverse chaining search"),
		GlobalParameter("_type", "token", "Resource type (for system-level searches)"),
		GlobalParameter("_count", "number", "Number of results per page"),
		GlobalParameter("_sort", "string", "Sort order for results"),
		GlobalParameter("_skip", "number", "Number of records to skip"),
		GlobalParameter("_include", "string", "Include referenced resources"),
		GlobalParameter("_revinclude", "string", "Include resources that reference this"),
		GlobalParameter("_summary", "token", "Return summary of results"),
		GlobalParameter("_elements", "string", "Specific elements to return"),
		GlobalParameter("_contained", "token", "How to handle contained resources"),
		GlobalParameter("_containedType", "token", "Type filter for contained resources"),
	],
}


_COMMON_ENUMS = {
	# Administrative gender (Patient, Person, Practitioner, RelatedPerson)
	"gender": ["male", "female", "other", "unknown"],
	"address.use": ["home", "work", "temp", "old"],
	"address.type": ["postal", "physical", "both"],
	"telecom.system": ["phone", "fax", "email", "pager", "url", "sms", "other"],
	"telecom.use": ["home", "work", "temp", "old", "mobile"],
	"name.use": ["usual", "official", "temp", "nickname", "anonymous", "old", "maiden"],
	"identifier.use": ["usual", "official", "temp", "secondary"],
	"status": ["active", "inactive", "entered-in-error"],
	"Encounter.status": ["planned", "arrived", "triaged", "in-progress", "onleave", "finished", "cancelled", "entered-in-error", "unknown"],
	"Observation.status": ["registered", "preliminary", "final", "amended", "corrected", "cancelled", "entered-in-error", "unknown"],
	"MedicationRequest.status": ["active", "on-hold", "cancelled", "completed", "entered-in-error", "stopped", "draft", "unknown"],
	"_summary": ["true", "false", "text", "data", "count"],
}


STU3_DATA = {
	"resource_types": [
		"Account", "ActivityDefinition", "AdverseEvent", "AllergyIntolerance",
		"Appointment", "AppointmentResponse", "AuditEvent", "Basic", "Binary",
		"BodySite", "Bundle", "CapabilityStatement", "CarePlan", "CareTeam",
		"ChargeItem", "Claim", "ClaimResponse", "ClinicalImpression", "CodeSystem",
		"Communication", "CommunicationRequest", "CompartmentDefinition", "Composition",
		"ConceptMap", "Condition", "Consent", "Contract", "Coverage", "DataElement",
		"DetectedIssue", "Device", "DeviceComponent", "DeviceMetric", "DeviceRequest",
		"DeviceUseStatement", "DiagnosticReport", "DocumentManifest", "DocumentReference",
		"EligibilityRequest", "EligibilityResponse", "Encounter", "Endpoint",
		"EnrollmentRequest", "EnrollmentResponse", "EpisodeOfCare", "ExpansionProfile",
		"ExplanationOfBenefit", "FamilyMemberHistory", "Flag", "Goal", "GraphDefinition",
		"Group", "GuidanceResponse", "HealthcareService", "ImagingManifest", "ImagingStudy",
		"Immunization", "ImmunizationRecommendation", "ImplementationGuide", "Library",
		"Linkage", "List", "Location", "Measure", "MeasureReport", "Media", "Medication",
		"MedicationAdministration", "MedicationDispense", "MedicationRequest",
		"MedicationStatement", "MessageDefinition", "MessageHeader", "NamingSystem",
		"NutritionOrder", "Observation", "OperationDefinition", "OperationOutcome",
		"Organization", "Patient", "PaymentNotice", "PaymentReconciliation", "Person",
		"PlanDefinition", "Practitioner", "PractitionerRole", "Procedure", "ProcedureRequest",
		"ProcessRequest", "ProcessResponse", "Provenance", "Questionnaire",
		"QuestionnaireResponse", "ReferralRequest", "RelatedPerson", "RequestGroup",
		"ResearchStudy", "ResearchSubject", "RiskAssessment", "Schedule", "SearchParameter",
		"Sequence", "ServiceDefinition", "Slot", "Specimen", "StructureDefinition",
		"StructureMap", "Subscription", "Substance", "SupplyDelivery", "SupplyRequest",
		"Task", "TestReport", "TestScript", "ValueSet", "VisionPrescription",
	],

	"reference_targets": {
		"subject": ["Patient", "Group", "Device", "Location"],
		"patient": ["Patient"],
		"encounter": ["Encounter"],
		"context": ["Encounter", "EpisodeOfCare"],
		"performer": ["Practitioner", "Organization", "Patient", "RelatedPerson"],
		"requester": ["Practitioner", "Organization", "Patient", "RelatedPerson", "Device"],
		"author": ["Practitioner", "Organization", "Patient", "RelatedPerson", "Device"],
		"organization": ["Organization"],
		"practitioner": ["Practitioner"],
		"general-practitioner": ["Practitioner", "Organization"],
		"location": ["Location"],
		"service-provider": ["Organization"],
		"participant": ["Practitioner", "RelatedPerson", "Patient", "Device", "HealthcareService", "Location"],
		"based-on": ["CarePlan", "ProcedureRequest", "ReferralRequest", "MedicationRequest"],
		"medication": ["Medication"],
		"specimen": ["Specimen"],
		"device": ["Device"],
		"result": ["Observation"],
		"request": ["MedicationRequest"],
		"source": ["Patient", "Practitioner", "RelatedPerson"],
		"episodeofcare": ["EpisodeOfCare"],
		"link": ["Patient", "RelatedPerson"],
	},

	"enum_values": dict(_COMMON_ENUMS, **{
		"Appointment.status": ["proposed", "pending", "booked", "arrived", "fulfilled", "cancelled", "noshow", "entered-in-error"],
		"Condition.clinicalStatus": ["active", "recurrence", "inactive", "remission", "resolved"],
		"Condition.verificationStatus": ["provisional", "differential", "confirmed", "refuted", "entered-in-error", "unknown"],
	}),
}


R4_DATA = {
	"resource_types": [
		"Account", "ActivityDefinition", "AdverseEvent", "AllergyIntolerance",
		"Appointment", "AppointmentResponse", "AuditEvent", "Basic", "Binary",
		"BiologicallyDerivedProduct", "BodyStructure", "Bundle", "CapabilityStatement",
		"CarePlan", "CareTeam", "CatalogEntry", "ChargeItem", "ChargeItemDefinition",
		"Claim", "ClaimResponse", "ClinicalImpression", "CodeSystem", "Communication",
		"CommunicationRequest", "CompartmentDefinition", "Composition", "ConceptMap",
		"Condition", "Consent", "Contract", "Coverage", "CoverageEligibilityRequest",
		"CoverageEligibilityResponse", "DetectedIssue", "Device", "DeviceDefinition",
		"DeviceMetric", "DeviceRequest", "DeviceUseStatement", "DiagnosticReport",
		"DocumentManifest", "DocumentReference", "EffectEvidenceSynthesis", "Encounter",
		"Endpoint", "EnrollmentRequest", "EnrollmentResponse", "EpisodeOfCare",
		"EventDefinition", "Evidence", "EvidenceVariable", "ExampleScenario",
		"ExplanationOfBenefit", "FamilyMemberHistory", "Flag", "Goal", "GraphDefinition",
		"Group", "GuidanceResponse", "HealthcareService", "ImagingStudy", "Immunization",
		"ImmunizationEvaluation", "ImmunizationRecommendation", "ImplementationGuide",
		"InsurancePlan", "Invoice", "Library", "Linkage", "List", "Location", "Measure",
		"MeasureReport", "Media", "Medication", "MedicationAdministration",
		"MedicationDispense", "MedicationKnowledge", "MedicationRequest",
		"MedicationStatement", "MedicinalProduct", "MedicinalProductAuthorization",
		"MedicinalProductContraindication", "MedicinalProductIndication",
		"MedicinalProductIngredient", "MedicinalProductInteraction",
		"MedicinalProductManufactured", "MedicinalProductPackaged",
		"MedicinalProductPharmaceutical", "MedicinalProductUndesirableEffect",
		"MessageDefinition", "MessageHeader", "MolecularSequence", "NamingSystem",
		"NutritionOrder", "Observation", "ObservationDefinition", "OperationDefinition",
		"OperationOutcome", "Organization", "OrganizationAffiliation", "Parameters",
		"Patient", "PaymentNotice", "PaymentReconciliation", "Person", "PlanDefinition",
		"Practitioner", "PractitionerRole", "Procedure", "Provenance", "Questionnaire",
		"QuestionnaireResponse", "RelatedPerson", "RequestGroup", "ResearchDefinition",
		"ResearchElementDefinition", "ResearchStudy", "ResearchSubject", "RiskAssessment",
		"RiskEvidenceSynthesis", "Schedule", "SearchParameter", "ServiceRequest", "Slot",
		"Specimen", "SpecimenDefinition", "StructureDefinition", "StructureMap",
		"Subscription", "Substance", "SubstanceNucleicAcid", "SubstancePolymer",
		"SubstanceProtein", "SubstanceReferenceInformation", "SubstanceSourceMaterial",
		"SubstanceSpecification", "SupplyDelivery", "SupplyRequest", "Task",
		"TerminologyCapabilities", "TestReport", "TestScript", "ValueSet",
		"VerificationResult", "VisionPrescription",
	],

	"reference_targets": {
		"subject": ["Patient", "Group", "Device", "Location"],
		"patient": ["Patient"],
		"encounter": ["Encounter"],
		"performer": ["Practitioner", "PractitionerRole", "Organization", "CareTeam", "Patient", "RelatedPerson"],
		"requester": ["Practitioner", "PractitionerRole", "Organization", "Patient", "RelatedPerson", "Device"],
		"author": ["Practitioner", "PractitionerRole", "Organization", "Patient", "RelatedPerson", "Device"],
		"organization": ["Organization"],
		"practitioner": ["Practitioner"],
		"general-practitioner": ["Practitioner", "PractitionerRole", "Organization"],
		"location": ["Location"],
		"service-provider": ["Organization"],
		"participant": ["Practitioner", "PractitionerRole", "RelatedPerson", "Patient", "Device", "HealthcareService", "Location"],
		"based-on": ["CarePlan", "ServiceRequest", "MedicationRequest", "DeviceRequest"],
		"medication": ["Medication"],
		"specimen": ["Specimen"],
		"device": ["Device"],
		"result": ["Observation"],
		"request": ["MedicationRequest"],
		"source": ["Patient", "Practitioner", "PractitionerRole", "RelatedPerson"],
		"episode-of-care": ["EpisodeOfCare"],
		"link": ["Patient", "RelatedPerson"],
	},

	"enum_values": dict(_COMMON_ENUMS, **{
		"Appointment.status": ["proposed", "pending", "booked", "arrived", "fulfilled", "cancelled", "noshow", "entered-in-error", "checked-in", "waitlist"],
		"Condition.clinical-status": ["active", "recurrence", "relapse", "inactive", "remission", "resolved"],
		"Condition.verification-status": ["unconfirmed", "provisional", "differential", "confirmed", "refuted", "entered-in-error"],
		"ServiceRequest.status": ["draft", "active", "on-hold", "revoked", "completed", "entered-in-error", "unknown"],
		"_total": ["none", "estimate", "accurate"],
	}),
}


DEFAULT_VERSION = "STU3"

VERSION_DATA = {
	"STU3": STU3_DATA,
	"R4": R4_DATA,
	"R4B": R4_DATA,
	"R5": R4_DATA,
}
