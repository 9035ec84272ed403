"""Medical safety validation for health protocols.

A small local interaction table plus condition checks. This is a screening aid
for trainers, not medical advice; anything above ``caution`` needs a
healthcare provider's approval.
"""
from typing import Any, Dict, Iterable, List, Optional

SAFETY_RATINGS = ('safe', 'caution', 'warning', 'contraindicated')

DRUG_INTERACTIONS: Dict[str, Dict[str, Any]] = {
    'warfarin': {
        'interactions': [
            {'substance': 'garlic', 'severity': 'medium',
             'description': 'Garlic may increase the anticoagulant effect of warfarin',
             'recommendation': 'Monitor INR closely if consuming large amounts of garlic'},
            {'substance': 'turmeric', 'severity': 'medium',
             'description': 'Turmeric may enhance the anticoagulant effect',
             'recommendation': 'Avoid high doses of turmeric supplements'},
            {'substance': 'ginger', 'severity': 'low',
             'description': 'Ginger may have mild anticoagulant effects',
             'recommendation': 'Use moderate amounts, monitor for bleeding'},
        ],
        'contraindications': ['active bleeding', 'severe liver disease'],
        'warnings': ['Monitor INR regularly', 'Avoid alcohol excess', 'Report unusual bleeding'],
    },
    'insulin': {
        'interactions': [
            {'substance': 'chromium', 'severity': 'medium',
             'description': 'Chromium may enhance insulin sensitivity',
             'recommendation': 'Monitor blood glucose closely'},
            {'substance': 'cinnamon', 'severity': 'low',
             'description': 'Cinnamon may lower blood glucose',
             'recommendation': 'Monitor blood sugar when using cinnamon supplements'},
        ],
        'contraindications': ['hypoglycemia'],
        'warnings': ['Monitor blood glucose regularly', 'Adjust dosing as needed'],
    },
    'metformin': {
        'interactions': [
            {'substance': 'berberine', 'severity': 'medium',
             'description': 'Berberine may enhance glucose-lowering effects',
             'recommendation': 'Monitor blood glucose closely'},
        ],
        'contraindications': ['severe kidney disease', 'severe liver disease'],
        'warnings': ['Monitor kidney function', 'Stop before contrast procedures'],
    },
    'lisinopril': {
        'interactions': [
            {'substance': 'potassium', 'severity': 'high',
             'description': 'ACE inhibitors can increase potassium levels',
             'recommendation': 'Avoid high-potassium supplements and foods'},
        ],
        'contraindications': ['pregnancy', 'angioedema history'],
        'warnings': ['Monitor kidney function and potassium levels'],
    },
    'synthroid': {
        'interactions': [
            {'substance': 'soy', 'severity': 'medium',
             'description': 'Soy may interfere with thyroid hormone absorption',
             'recommendation': 'Take thyroid medication 4 hours before soy consumption'},
            {'substance': 'calcium', 'severity': 'medium',
             'description': 'Calcium can reduce thyroid hormone absorption',
             'recommendation': 'Take thyroid medication 4 hours before calcium supplements'},
        ],
        'contraindications': ['untreated adrenal insufficiency'],
        'warnings': ['Take on empty stomach', 'Monitor thyroid function'],
    },
}

CONDITION_CHECKS: Dict[str, Dict[str, str]] = {
    'pregnancy': {
        'severity': 'high',
        'description': 'Many protocol components are not safe during pregnancy',
        'recommendation': 'Avoid detox and cleanse protocols during pregnancy. Focus on gentle, pregnancy-safe nutrition.',
    },
    'breastfeeding': {
        'severity': 'high',
        'description': 'Cleanse protocols can affect breast milk quality',
        'recommendation': 'Avoid intensive protocols while breastfeeding. Focus on gentle, nourishing foods.',
    },
    'kidney disease': {
        'severity': 'high',
        'description': 'Kidney disease requires careful monitoring of protein and electrolyte intake',
        'recommendation': 'Require healthcare provider approval. Monitor kidney function closely.',
    },
    'liver disease': {
        'severity': 'high',
        'description': 'Liver disease affects detoxification and supplement metabolism',
        'recommendation': 'Require healthcare provider approval. Avoid detox protocols.',
    },
    'diabetes': {
        'severity': 'medium',
        'description': 'Dietary changes can affect blood sugar control',
        'recommendation': 'Monitor blood glucose closely. Adjust medications as needed with healthcare provider.',
    },
    'heart disease': {
        'severity': 'medium',
        'description': 'Heart conditions may be affected by dietary and supplement changes',
        'recommendation': 'Monitor cardiovascular symptoms. Ensure adequate nutrition.',
    },
    'high blood pressure': {
        'severity': 'medium',
        'description': 'Some protocol components may affect blood pressure',
        'recommendation': 'Monitor blood pressure regularly. Be cautious with sodium and supplements.',
    },
}

GENERAL_RECOMMENDATIONS = [
    'Consult with your healthcare provider before starting this protocol',
    'Monitor for any unusual symptoms or side effects',
    'Inform your healthcare provider of any changes in medications',
]


def check_condition(condition: str) -> Optional[Dict[str, str]]:
    lowered = condition.lower()
    for key, check in CONDITION_CHECKS.items():
        if key in lowered:
            return check
    return None


def _protocol_text(protocol: Optional[Dict[str, Any]]) -> str:
    if not protocol:
        return ''
    return repr(protocol).lower()


def validate_safety(medications: Iterable[str] = (), conditions: Iterable[str] = (),
                    allergies: Iterable[str] = (), protocol: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Screen a protocol against the client's medications, conditions and allergies.

    Rating: contraindicated when a listed medication has contraindications or
    any interaction is high; caution when something medium or any interaction
    was found; safe otherwise.
    """
    interactions: List[Dict[str, Any]] = []
    recommendations: List[str] = []
    has_contraindications = False
    protocol_text = _protocol_text(protocol)

    for medication in medications:
        drug = DRUG_INTERACTIONS.get(medication.strip().lower())
        if not drug:
            continue
        for interaction in drug['interactions']:
            interactions.append({
                'type': 'medication',
                'item': medication,
                'substance': interaction['substance'],
                'severity': interaction['severity'],
                'description': interaction['description'],
                'recommendation': interaction['recommendation'],
                'inProtocol': bool(protocol_text) and interaction['substance'] in protocol_text,
            })
        recommendations.extend(f"{medication}: {warning}" for warning in drug['warnings'])
        if drug['contraindications']:
            has_contraindications = True
            recommendations.append(
                f"{medication}: Check for contraindications - {', '.join(drug['contraindications'])}")

    for condition in conditions:
        check = check_condition(condition)
        if check:
            interactions.append({'type': 'condition', 'item': condition, **check})

    for allergy in allergies:
        name = allergy.strip().lower()
        if name and name in protocol_text:
            interactions.append({
                'type': 'allergy',
                'item': allergy,
                'severity': 'high',
                'description': f'Protocol references {allergy}, a listed allergen',
                'recommendation': f'Remove {allergy} from the protocol or choose an alternative',
            })

    severities = {i['severity'] for i in interactions}
    if has_contraindications or 'high' in severities:
        rating = 'contraindicated'
    elif 'medium' in severities or interactions:
        rating = 'caution'
    else:
        rating = 'safe'

    for rec in GENERAL_RECOMMENDATIONS:
        if rec not in recommendations:
            recommendations.append(rec)

    return {
        'safetyRating': rating,
        'interactions': interactions,
        'generalRecommendations': recommendations,
        'requiresHealthcareApproval': rating in ('warning', 'contraindicated'),
        'canProceedWithCaution': rating in ('safe', 'caution'),
    }
