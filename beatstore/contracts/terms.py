"""License agreement text for each purchase tier.

Only the grants differ between the two leases. The exclusive agreement swaps
the non-exclusive grant clauses for unlimited exclusive ones and runs in
perpetuity. Output depends on nothing but the arguments.
"""
from collections import namedtuple

from ..tiers import PurchaseTier, lookup, require_total

PRODUCER_ALIAS = 'jj.aholics'
LICENSOR_NAME = 'Joseph Anderson'
LICENSOR_EMAIL = 'jj.aholics@gmail.com'

# Bolded by the PDF renderer
NON_REFUNDABLE_NOTICE = 'All licenses are non-refundable and non-transferable.'

ContractInput = namedtuple('ContractInput', [
    'order_number',
    'contract_date',
    'track_name',
    'customer_name',
    'customer_email',
    'price',
    'purchase_code',
    'track_id',
])

LeaseTerms = namedtuple('LeaseTerms', [
    'header',
    'copies',
    'audio_streams',
    'for_profit_performances',
    'video_streams',
])

LEASE_TERMS = {
    PurchaseTier.MP3: LeaseTerms(
        header='Non Exclusive',
        copies='Two Thousand Five Hundred (2500)',
        audio_streams='Five Thousand (5000)',
        for_profit_performances='10',
        video_streams='5000',
    ),
    PurchaseTier.WAV: LeaseTerms(
        header='Non Exclusive',
        copies='Seven Thousand Five Hundred (7500)',
        audio_streams='Ten Thousand (10000)',
        for_profit_performances='200',
        video_streams='5000',
    ),
    PurchaseTier.EXCLUSIVE: LeaseTerms(
        header='Exclusive',
        copies=None,
        audio_streams=None,
        for_profit_performances=None,
        video_streams=None,
    ),
}

require_total(LEASE_TERMS, 'LEASE_TERMS')


def header_title(tier, track_name):
    return f'{PRODUCER_ALIAS} - {track_name}: {lookup(LEASE_TERMS, tier).header}'


def header_subtitle(order_number):
    return f'License Agreement For Order #{order_number}'


def _parties(data):
    return [
        f'THIS LICENSE AGREEMENT is made on {data.contract_date} ("Effective Date") by and between',
        f'{data.customer_name} (hereinafter referred to as the "Licensee", contact email {data.customer_email}) '
        f'and {LICENSOR_NAME} professionally known as {PRODUCER_ALIAS} ("Songwriter").',
        f'Licensor contact email {LICENSOR_EMAIL}. Licensor warrants that it controls the mechanical rights in '
        f'and to the copyrighted musical work entitled {data.track_name} ("Composition"). The Composition, '
        f'including the music thereof, was composed by {PRODUCER_ALIAS} ("Songwriter") managed under the Licensor.',
        '',
        NON_REFUNDABLE_NOTICE,
        '',
    ]


def _lease_grants(terms, data):
    return [
        'Master Use. The Licensor hereby grants to Licensee a non-exclusive license (this "License") to record '
        'vocal synchronization to the Composition partly or in its entirety and substantially in its original '
        'form ("Master Recording").',
        '',
        'Mechanical Rights. The Licensor hereby grants to Licensee a non-exclusive license to use Master Recording '
        'in the reproduction, duplication, manufacture, and distribution of phonograph records, cassette tapes, '
        'compact disk, digital downloads, other miscellaneous audio and digital recordings, and any lifts and '
        'versions thereof (collectively, the "Recordings", and individually, a "Recordings") worldwide for up to '
        f'the pressing or selling a total of {terms.copies} copies of such Recordings or any combination of such '
        f'Recordings, condition upon the payment to the Licensor a sum of ${data.price}, receipt of which is '
        f'confirmed. This license allows up to {terms.audio_streams} monetized audio streams to sites like '
        '(Spotify, RDIO, Rhapsody) but not eligible for monetization on YouTube.',
        '',
        'Performance Rights. The Licensor here by grants to Licensee a non-exclusive license to use the Master '
        f'Recording in Unlimited non-profit and {terms.for_profit_performances} for-profit performances, shows, '
        'or concerts.',
        '',
        'Synchronization Rights. The Licensor hereby grants limited synchronization rights for One (1) music video '
        f'streamed online (Youtube, Vimeo, etc..) for up to {terms.video_streams} monetized video streams on all '
        'total sites. A separate synchronization license will need to be purchased for distribution of video to '
        'Television, Film or Video game.',
        '',
        'Broadcast Rights. The Licensor hereby grants to Licensee no broadcasting rights.',
        '',
    ]


def _exclusive_grants(data):
    return [
        'Master Use. The Licensor hereby grants to Licensee an exclusive license (this "License") to record vocal '
        'synchronization to the Composition partly or in its entirety and substantially in its original form '
        '("Master Recording"). Upon the Effective Date the Licensor shall cease to offer the Composition for '
        'license to any third party.',
        '',
        'Mechanical Rights. The Licensor hereby grants to Licensee an exclusive license to use Master Recording in '
        'the reproduction, duplication, manufacture, and distribution of phonograph records, cassette tapes, '
        'compact disk, digital downloads, other miscellaneous audio and digital recordings, and any lifts and '
        'versions thereof (collectively, the "Recordings", and individually, a "Recordings") worldwide for an '
        'Unlimited number of copies of such Recordings or any combination of such Recordings, condition upon the '
        f'payment to the Licensor a sum of ${data.price}, receipt of which is confirmed. This license allows '
        'Unlimited monetized audio streams on all sites, including monetization on YouTube.',
        '',
        'Performance Rights. The Licensor here by grants to Licensee an exclusive license to use the Master '
        'Recording in Unlimited non-profit and Unlimited for-profit performances, shows, or concerts.',
        '',
        'Synchronization Rights. The Licensor hereby grants synchronization rights for Unlimited music videos '
        'streamed online (Youtube, Vimeo, etc..) with Unlimited monetized video streams on all total sites. '
        'Distribution of video to Television, Film or Video game is included.',
        '',
        'Broadcast Rights. The Licensor hereby grants to Licensee broadcasting rights for Unlimited radio '
        'stations.',
        '',
    ]


def _closing(data, exclusive):
    if exclusive:
        term = ('Term. Executed by the Licensor and the Licensee, to be effective as for all purposes as of the '
                'Effective Date first mentioned above and shall continue in perpetuity.')
    else:
        term = ('Term. Executed by the Licensor and the Licensee, to be effective as for all purposes as of the '
                'Effective Date first mentioned above and shall terminate exactly ten (10) years from this date.')
    return [
        'Credit. Licensee shall acknowledge the original authorship of the Composition appropriately and '
        'reasonably in all media and performance formats under the name '
        f'"{LICENSOR_NAME}" in writing where possible and vocally otherwise.',
        '',
        'Consideration. In consideration for the rights granted under this agreement, Licensee shall pay to '
        f'licensor the sum of ${data.price} and other good and valuable consideration, payable to '
        f'"{LICENSOR_NAME}", receipt of which is hereby acknowledged. If the Licensee fails to account to the '
        'Licensor, timely complete the payments provided for hereunder, or perform its other obligations '
        'hereunder, including having insufficient bank balance, the licensor shall have the right to terminate '
        'License upon written notice to the Licensee. Such termination shall render the recording, manufacture '
        'and/or distribution of Recordings for which monies have not been paid subject to and actionable '
        'infringements under applicable law, including, without limitation, the United States Copyright Act, '
        'as amended.',
        '',
        'Indemnification. Accordingly, Licensee agrees to indemnify and hold Licensor harmless from and against '
        'any and all claims, losses, damages, costs, expenses, including, without limitation, reasonable '
        "attorney's fees, arising of or resulting from a claimed breach of any of Licensee's representations, "
        'warranties or agreements hereunder.',
        '',
        'Audio Samples. 3rd party sample clearance is the responsibility of the licensee.',
        '',
        'Miscellaneous. This license is non-transferable and is limited to the Composition specified above, '
        'constitutes the entire agreement between the Licensor and the Licensee relating to the Composition, and '
        'shall be binding upon both the Licensor and the Licensee and their respective successors, assigns, and '
        'legal representatives.',
        '',
        term,
        '',
        f'THIS LICENSE AGREEMENT is provided for Order {data.order_number}, PayPal payKey confirming purchase '
        f'{data.purchase_code}',
        f'Track unique uuid {data.track_id}',
    ]


def build_contract_lines(tier, data):
    """Return the agreement body as a list of paragraphs ('' marks a gap)."""
    terms = lookup(LEASE_TERMS, tier)
    exclusive = tier is PurchaseTier.EXCLUSIVE
    grants = _exclusive_grants(data) if exclusive else _lease_grants(terms, data)
    return _parties(data) + grants + _closing(data, exclusive)
