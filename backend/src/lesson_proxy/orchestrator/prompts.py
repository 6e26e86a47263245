from lesson_proxy.orchestrator.context import LessonPlanContext

# Output slot -> section-specific instruction, in page order.
SECTION_INSTRUCTIONS: dict[str, str] = {
    "refOutput": (
        "Gumawa ng BATAYANG SANGGUNIAN SA PAGKATUTO, batay sa aklat ng EPP 5 at online "
        "resources. Magbigay ng 3-4 entries."
    ),
    "balikAralOutput": (
        "Gumawa ng 1. Maikling Balik-aral. Magbigay ng 2-3 tanong na nakatuon sa nakaraang "
        "aralin."
    ),
    "feedbackOutput": (
        "Gumawa ng 2. Pidbak: Tanong-Tugon. Magbigay ng 2-3 tanong para sa quick check ng "
        "pag-unawa."
    ),
    "hookActivityOutput": (
        "Gumawa ng 1. Panghikayat na Gawain. Isang simpleng laro o aktibidad na may 2-3 "
        "hakbang."
    ),
    "importanceOutput": (
        "Gumawa ng 2. Paglinang sa Kahalagahan sa Pagkatuto. Magbigay ng 3-4 na mahahalagang "
        "punto na isusulat sa loob ng bilog."
    ),
    "vocabularyOutput": (
        "Gumawa ng 3. Paghawan ng Bokabolaryo. Magbigay ng 3-4 na mahihirap na salita mula sa "
        "Nilalaman/Topic, kasama ang depinisyon."
    ),
    "processingOutput": (
        "Gumawa ng 1. Pagproseso sa Pag-unawa. Magbigay ng maikling talakayan (2-3 talata) at "
        "2-3 tanong."
    ),
    "guidedPracticeOutput": (
        "Gumawa ng 2. Pinatnubayang Pagsasanay. Isang simpleng gawain na ginagawa nang "
        "pangkat/magkasama. Magbigay ng 3 hakbang."
    ),
    "applicationOutput": (
        "Gumawa ng 3. Paglalapat at Pag-uugnay. Isang indibidwal na gawain na nag-uugnay ng "
        "aralin sa tunay na buhay. Magbigay ng 3-4 na tanong/scenario."
    ),
    "takeawayOutput": (
        "Gumawa ng 1. Pabaong Pagkatuto. Isang concise na paglalahat (generalization) ng buong "
        "aralin sa 2-3 pangungusap."
    ),
    "assessmentOutput": (
        "Gumawa ng 1. Pagsusulit (5 items). Multiple Choice o Identification (fill in the "
        "blanks) batay sa Nilalaman/Topic."
    ),
}

OUTPUT_SLOTS: tuple[str, ...] = tuple(SECTION_INSTRUCTIONS)


def build_prompts(context: LessonPlanContext) -> dict[str, str]:
    shared = context.render()
    return {slot: f"{shared} {instruction}" for slot, instruction in SECTION_INSTRUCTIONS.items()}
