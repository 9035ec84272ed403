import io
import re
from datetime import date
from typing import Any, Dict, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, letter, landscape, portrait
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import KeepTogether, PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from xml.sax.saxutils import escape

from fitmeal.logic.reporting.nutrition import compute_plan_nutrition, recipe_macros
from fitmeal.logic.shopping.list_builder import build_shopping_list, format_item
from fitmeal.utilities.constants import PDF_BRAND_NAME, PDF_BRAND_TAGLINE, PDF_COLORS, PDF_DATE_FORMAT

PAGE_SIZES = {'A4': A4, 'Letter': letter}


def pdf_filename(customer_name: Optional[str], today: Optional[date] = None) -> str:
    """EvoFit_Meal_Plan_<safe name>_<YYYY-MM-DD>.pdf"""
    safe = re.sub(r'[^a-z0-9]', '_', (customer_name or 'meal-plan').lower())
    return f"EvoFit_Meal_Plan_{safe}_{(today or date.today()).isoformat()}.pdf"


def _styles():
    styles = getSampleStyleSheet()
    primary = colors.HexColor(PDF_COLORS['primary'])
    text = colors.HexColor(PDF_COLORS['text'])
    styles.add(ParagraphStyle('Brand', parent=styles['Title'], textColor=primary, fontSize=26, spaceAfter=6))
    styles.add(ParagraphStyle('Tagline', parent=styles['Normal'], textColor=text, alignment=1, fontSize=11))
    styles.add(ParagraphStyle('CardTitle', parent=styles['Heading3'], textColor=primary, spaceAfter=4))
    styles.add(ParagraphStyle('Small', parent=styles['Normal'], fontSize=9, textColor=text, leading=12))
    return styles


def _table(data, header_color: str, col_widths=None) -> Table:
    table = Table(data, repeatRows=1, colWidths=col_widths)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(header_color)),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("ALIGN", (1, 1), (-1, -1), "CENTER"),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor(PDF_COLORS['grey'])]),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]))
    return table


def _recipe_card(meal: Dict[str, Any], styles) -> KeepTogether:
    recipe = meal.get('recipe') or {}
    macros = recipe_macros(recipe)
    title = f"Day {meal.get('day')} - Meal {meal.get('mealNumber')} ({escape(str(meal.get('mealType', '')))}): {escape(recipe.get('name', ''))}"
    parts = [Paragraph(title, styles['CardTitle'])]
    if recipe.get('description'):
        parts.append(Paragraph(escape(recipe['description']), styles['Small']))
    parts.append(Paragraph(
        f"{macros['calories']:.0f} kcal | Protein {macros['protein']:.0f}g | "
        f"Carbs {macros['carbs']:.0f}g | Fat {macros['fat']:.0f}g | "
        f"Prep {recipe.get('prepTimeMinutes') or 0} min | Servings {recipe.get('servings') or 1}",
        styles['Small']))
    ingredients = recipe.get('ingredientsJson') or []
    if ingredients:
        lines = ', '.join(escape(' '.join(str(p) for p in (i.get('amount'), i.get('unit'), i.get('name')) if p))
                          for i in ingredients)
        parts.append(Paragraph(f"<b>Ingredients:</b> {lines}", styles['Small']))
    if recipe.get('instructionsText'):
        steps = escape(recipe['instructionsText']).replace('\n', '<br/>')
        parts.append(Paragraph(f"<b>Instructions:</b><br/>{steps}", styles['Small']))
    parts.append(Spacer(1, 10))
    return KeepTogether(parts)


def generate_meal_plan_pdf(meal_plan_data: Dict[str, Any], customer_name: Optional[str] = None,
                           include_macro_summary: bool = True, include_shopping_list: bool = True,
                           orientation: str = 'portrait', page_size: str = 'A4') -> bytes:
    """Render a branded meal plan PDF.

    Layout: title block, optional macro summary per day, one recipe card per
    meal (a new page for every plan day), optional shopping list page.
    """
    size = PAGE_SIZES.get(page_size, A4)
    size = landscape(size) if orientation == 'landscape' else portrait(size)
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=size,
        rightMargin=36, leftMargin=36, topMargin=36, bottomMargin=36,
        title=meal_plan_data.get('planName', 'Meal Plan'), author=PDF_BRAND_NAME,
    )
    styles = _styles()

    elements = [
        Paragraph(PDF_BRAND_NAME, styles['Brand']),
        Paragraph(PDF_BRAND_TAGLINE, styles['Tagline']),
        Spacer(1, 18),
        Paragraph(escape(meal_plan_data.get('planName', 'Meal Plan')), styles['Title']),
    ]
    details = [
        f"<b>Prepared for:</b> {escape(customer_name or 'Client')}",
        f"<b>Date:</b> {date.today().strftime(PDF_DATE_FORMAT)}",
        f"<b>Goal:</b> {escape(str(meal_plan_data.get('fitnessGoal', '')))}",
        f"<b>Daily calories:</b> {meal_plan_data.get('dailyCalorieTarget', '')} kcal",
        f"<b>Length:</b> {meal_plan_data.get('days', '')} days, {meal_plan_data.get('mealsPerDay', '')} meals per day",
    ]
    for line in details:
        elements.append(Paragraph(line, styles['Normal']))
    if meal_plan_data.get('description'):
        elements += [Spacer(1, 6), Paragraph(escape(meal_plan_data['description']), styles['Small'])]
    elements.append(Spacer(1, 16))

    if include_macro_summary:
        nutrition = compute_plan_nutrition(meal_plan_data)
        data = [["Day", "Meals", "Calories", "Protein (g)", "Carbs (g)", "Fat (g)"]]
        for day, stats in nutrition['days'].items():
            data.append([f"Day {day}", stats['meals'], f"{stats['calories']:.0f}",
                         f"{stats['protein']:.0f}", f"{stats['carbs']:.0f}", f"{stats['fat']:.0f}"])
        avg = nutrition['daily_average']
        data.append(["Daily average", "", f"{avg['calories']:.0f}", f"{avg['protein']:.0f}",
                     f"{avg['carbs']:.0f}", f"{avg['fat']:.0f}"])
        elements += [Paragraph("Nutrition Summary", styles['Heading2']),
                     _table(data, PDF_COLORS['accent'])]

    meals = sorted(meal_plan_data.get('meals') or [],
                   key=lambda m: (int(m.get('day') or 0), int(m.get('mealNumber') or 0)))
    current_day = None
    for meal in meals:
        if meal.get('day') != current_day:
            current_day = meal.get('day')
            elements += [PageBreak(), Paragraph(f"Day {current_day}", styles['Heading2'])]
        elements.append(_recipe_card(meal, styles))

    if include_shopping_list:
        items = build_shopping_list(meal_plan_data)
        if items:
            data = [["", "Item"]] + [["[ ]", Paragraph(escape(format_item(i)), styles['Small'])] for i in items]
            elements += [PageBreak(), Paragraph("Shopping List", styles['Heading2']),
                         _table(data, PDF_COLORS['primary'], col_widths=[30, None])]

    doc.build(elements)
    return buf.getvalue()
