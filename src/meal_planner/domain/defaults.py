"""Starter day plan shown before the first generated plan arrives."""

from meal_planner.domain.meals import Meal, MealType

STARTER_MEALS: tuple[Meal, ...] = (
    Meal(
        id="1",
        type=MealType.BREAKFAST,
        name="Masala Omelette & Toast",
        calories=450,
        protein=25,
        carbs=35,
        fat=22,
        fiber=6,
        prep_time="20min",
        difficulty="Easy",
        description=(
            "A spicy, protein-packed start to your day. Eggs whisked with onions, "
            "green chilies, and coriander, served with whole wheat toast."
        ),
        ingredients=("3 Eggs", "1 Onion", "Green Chili", "2 slices Whole Wheat Bread"),
        emoji="\N{COOKING}",
    ),
    Meal(
        id="2",
        type=MealType.LUNCH,
        name="Chicken Biryani Bowl",
        calories=700,
        protein=40,
        carbs=68,
        fat=30,
        fiber=10,
        prep_time="45min",
        difficulty="Medium",
        description="Portion controlled biryani with an extra chicken piece.",
        ingredients=(
            "150g Chicken Breast",
            "1 Cup Basmati Rice",
            "Yogurt Raita",
            "Spices",
        ),
        emoji="\N{COOKED RICE}",
    ),
    Meal(
        id="3",
        type=MealType.SNACK,
        name="Greek Yogurt & Berries",
        calories=200,
        protein=15,
        carbs=25,
        fat=4,
        fiber=5,
        prep_time="5min",
        difficulty="Easy",
        description="Quick protein fix. Greek yogurt topped with mixed berries.",
        ingredients=("1 Cup Greek Yogurt", "Handful Berries"),
        emoji="\N{BLUEBERRIES}",
    ),
    Meal(
        id="4",
        type=MealType.DINNER,
        name="Grilled Beef Burger",
        calories=600,
        protein=35,
        carbs=30,
        fat=35,
        fiber=4,
        prep_time="25min",
        difficulty="Medium",
        description="Lean beef patty served open-faced with lettuce and tomato.",
        ingredients=("150g Lean Beef", "Lettuce wrap or half bun", "Cheese slice"),
        emoji="\N{HAMBURGER}",
    ),
)
