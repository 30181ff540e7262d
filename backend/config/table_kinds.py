"""
Column roles per reference table kind

Each table kind names the columns that hold TLK string references, plus the
column visibility and ordering hints handed to the presentation layer as-is.
"""
import re
from dataclasses import dataclass, field
from typing import Dict, Tuple

from parsers.tda import DEFAULT_REFERENCE_COLUMNS


@dataclass(frozen=True)
class TableKindConfig:
    """Column roles for one kind of 2DA table"""
    kind: str
    label: str
    description: str
    filename: str
    reference_columns: frozenset = field(default=DEFAULT_REFERENCE_COLUMNS)
    hidden_columns: Tuple[str, ...] = ()
    column_order: Tuple[str, ...] = ()
    description_columns: Tuple[str, ...] = ()

    def to_dict(self) -> Dict:
        return {
            'kind': self.kind,
            'label': self.label,
            'description': self.description,
            'filename': self.filename,
            'reference_columns': sorted(self.reference_columns),
            'hidden_columns': list(self.hidden_columns),
            'column_order': list(self.column_order),
            'description_columns': list(self.description_columns),
        }


TABLE_KINDS: Dict[str, TableKindConfig] = {
    'appearance': TableKindConfig(
        kind='appearance',
        label='Appearance',
        description='Character and creature appearance definitions',
        filename='appearance.2da',
        hidden_columns=(
            'STRING_REF', 'ENVMAP', 'BLOODCOLR', 'WING_TAIL_SCALE', 'HELMET_SCALE_M',
            'HELMET_SCALE_F', 'PERSPACE', 'CREPERSPACE', 'TARGETHEIGHT', 'ABORTONPARRY',
            'PERCEPTIONDIST', 'FOOTSTEPTYPE', 'SOUNDAPPTYPE', 'HEADTRACK', 'HEAD_ARC_H',
            'HEAD_ARC_V', 'BODY_BAG', 'TARGETABLE',
        ),
        column_order=('ID', 'LABEL', 'NAME'),
        description_columns=('NAME',),
    ),
    'feats': TableKindConfig(
        kind='feats',
        label='Feats',
        description='Available feats and their properties',
        filename='feat.2da',
        hidden_columns=(
            'GAINMULTIPLE', 'CATEGORY', 'MAXCR', 'CRValue', 'TOOLSCATEGORIES', 'PreReqEpic',
        ),
        column_order=('ID', 'LABEL', 'FEAT', 'DESCRIPTION'),
        description_columns=('DESCRIPTION',),
    ),
    'spells': TableKindConfig(
        kind='spells',
        label='Spells',
        description='Spell definitions, schools and casting data',
        filename='spells.2da',
        hidden_columns=(
            'ConjAnim', 'ConjHeadVisual', 'ConjHandVisual', 'ConjGrndVisual', 'ConjSoundVFX',
            'ConjSoundMale', 'ConjSoundFemale', 'CastHeadVisual', 'CastHandVisual',
            'CastGrndVisual', 'CastSound', 'ProjModel', 'ProjType', 'ProjSpwnPoint',
            'ProjSound', 'ProjOrientation', 'ItemImmunity', 'Category', 'UserType',
            'Counter1', 'Counter2', 'Necro', 'Blighter', 'TargetSizeX', 'TargetSizeY',
            'TargetFlags',
        ),
        column_order=('ID', 'Label', 'Name', 'SpellDesc'),
        description_columns=('SpellDesc',),
    ),
    'placeables': TableKindConfig(
        kind='placeables',
        label='Placeables',
        description='Placeable object models and lighting',
        filename='placeables.2da',
        hidden_columns=(
            'LightOffsetX', 'LightOffsetY', 'LightOffsetZ', 'BodyBag', 'LowGore', 'Reflection',
        ),
        column_order=('ID', 'Label', 'ModelName', 'LightColor', 'SoundAppType',
                      'ShadowSize', 'Static'),
    ),
}

DEFAULT_TABLE_KIND = 'spells'


def get_table_kind(name: str) -> TableKindConfig:
    """Pick the table kind from a resource name or title, defaulting to spells"""
    name_lower = name.lower()
    if 'appearance' in name_lower:
        return TABLE_KINDS['appearance']
    if 'feat' in name_lower:
        return TABLE_KINDS['feats']
    if 'spell' in name_lower:
        return TABLE_KINDS['spells']
    if 'placeable' in name_lower:
        return TABLE_KINDS['placeables']
    return TABLE_KINDS[DEFAULT_TABLE_KIND]


def clean_column_name(column_name: str) -> str:
    """Display label for a column: underscores to spaces, split on capitals, title case"""
    spaced = re.sub(r'([A-Z])', r' \1', column_name.replace('_', ' '))
    return re.sub(r'\b\w', lambda m: m.group(0).upper(), spaced).strip()
