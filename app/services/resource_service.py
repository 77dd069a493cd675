"""
Resource Service - static sample letters and service-year tips.
"""

from typing import List, Optional

from app.models.resource import Resource, ResourceType


SAMPLE_LETTERS: List[Resource] = [
    Resource(
        id="1",
        title="PPA Request Letter",
        description="Template for requesting a Primary Place of Assignment",
        type=ResourceType.LETTER,
        content="""[Your Name]
[Your State Code]
[Your Batch]
[Date]

The Director,
[PPA Name],
[PPA Address],
[City, State].

Dear Sir/Ma,

REQUEST FOR PRIMARY PLACE OF ASSIGNMENT

I am writing to request for a Primary Place of Assignment (PPA) in your organization. I am a corps member currently serving in [State] and I am interested in contributing my skills and knowledge to your organization.

I have attached my credentials and I am available for an interview at your convenience.

Thank you for your consideration.

Yours faithfully,
[Your Name]
[Your State Code]""",
    ),
    Resource(
        id="2",
        title="Leave of Absence Letter",
        description="Template for requesting leave of absence",
        type=ResourceType.LETTER,
        content="""[Your Name]
[Your State Code]
[Your Batch]
[Date]

The State Coordinator,
NYSC [State] Secretariat,
[Address].

Dear Sir/Ma,

REQUEST FOR LEAVE OF ABSENCE

I am writing to request for a leave of absence from [Start Date] to [End Date] due to [Reason].

I have made necessary arrangements to ensure my duties are covered during this period.

Thank you for your consideration.

Yours faithfully,
[Your Name]
[Your State Code]""",
    ),
]

TIPS: List[Resource] = [
    Resource(
        id="1",
        title="Accommodation Tips",
        description="Essential tips for finding and securing accommodation during service",
        type=ResourceType.TIP,
        content="""1. Start your search early, at least 2-3 weeks before resuming at your PPA
2. Consider security and proximity to your PPA
3. Negotiate rent prices and payment terms
4. Get a written agreement
5. Take photos of the property before moving in
6. Keep receipts of all payments
7. Consider sharing with other corps members to reduce costs
8. Check for basic amenities (water, electricity, security)
9. Verify the landlord's ownership of the property
10. Keep your state coordinator informed of your address""",
    ),
    Resource(
        id="2",
        title="Clearance Tips",
        description="Important tips for successful clearance",
        type=ResourceType.TIP,
        content="""1. Keep all your documents organized
2. Make copies of important documents
3. Start clearance process early
4. Follow up regularly with relevant offices
5. Keep track of all signatures and stamps
6. Maintain a good relationship with your PPA supervisor
7. Attend all mandatory programs
8. Keep your call-up letter and other original documents safe
9. Take photos of all clearance documents
10. Stay in touch with your state coordinator""",
    ),
]


def list_resources(resource_type: Optional[ResourceType] = None) -> List[Resource]:
    if resource_type == ResourceType.LETTER:
        return list(SAMPLE_LETTERS)
    if resource_type == ResourceType.TIP:
        return list(TIPS)
    return SAMPLE_LETTERS + TIPS


def get_resource(resource_type: ResourceType, resource_id: str) -> Optional[Resource]:
    for resource in list_resources(resource_type):
        if resource.id == resource_id:
            return resource
    return None
