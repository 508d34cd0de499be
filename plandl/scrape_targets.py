"""Aircraft the catalog builder searches Wikimedia Commons for."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ScrapeTarget:
    manufacturer: str
    model: str
    version: str
    search: str


TARGETS: tuple[ScrapeTarget, ...] = (
    # Cessna variants
    ScrapeTarget("Cessna", "310", "Standard", "Cessna 310"),
    ScrapeTarget("Cessna", "337", "Skymaster", "Cessna 337"),
    ScrapeTarget("Cessna", "340", "Standard", "Cessna 340"),
    ScrapeTarget("Cessna", "402", "Businessliner", "Cessna 402"),
    ScrapeTarget("Cessna", "421", "Golden Eagle", "Cessna 421"),
    ScrapeTarget("Cessna", "Citation", "CJ3", "Cessna Citation CJ3"),
    ScrapeTarget("Cessna", "Citation", "Longitude", "Cessna Citation Longitude"),
    ScrapeTarget("Cessna", "Citation", "X", "Cessna Citation X"),
    ScrapeTarget("Cessna", "206", "Stationair", "Cessna 206"),
    ScrapeTarget("Cessna", "210", "Centurion", "Cessna 210"),
    ScrapeTarget("Cessna", "195", "Businessliner", "Cessna 195"),

    # Piper variants
    ScrapeTarget("Piper", "PA-32", "Cherokee Six", "Piper PA-32"),
    ScrapeTarget("Piper", "PA-34", "Seneca", "Piper Seneca"),
    ScrapeTarget("Piper", "PA-44", "Seminole", "Piper Seminole"),
    ScrapeTarget("Piper", "PA-60", "Aerostar", "Piper Aerostar"),
    ScrapeTarget("Piper", "PA-31", "Navajo", "Piper Navajo"),
    ScrapeTarget("Piper", "J-3", "Cub", "Piper J-3 Cub"),

    # Grumman/American General
    ScrapeTarget("Grumman", "AA-5", "Tiger", "Grumman Tiger"),
    ScrapeTarget("American General", "AG-5B", "Tiger", "American General Tiger"),
    ScrapeTarget("Grumman", "G-21", "Goose", "Grumman Goose"),

    # Socata/Daher TBM
    ScrapeTarget("Daher", "TBM 940", "Standard", "TBM 940"),
    ScrapeTarget("Socata", "TBM 700", "Standard", "TBM 700"),

    # Military - Jets
    ScrapeTarget("North American", "F-86", "Sabre", "F-86 Sabre"),
    ScrapeTarget("North American", "F-100", "Super Sabre", "F-100 Super Sabre"),
    ScrapeTarget("Lockheed", "F-104", "Starfighter", "F-104 Starfighter"),
    ScrapeTarget("Republic", "F-105", "Thunderchief", "F-105 Thunderchief"),
    ScrapeTarget("General Dynamics", "F-111", "Aardvark", "F-111 Aardvark"),
    ScrapeTarget("McDonnell Douglas", "A-4", "Skyhawk", "A-4 Skyhawk"),
    ScrapeTarget("Grumman", "A-6", "Intruder", "A-6 Intruder"),
    ScrapeTarget("McDonnell Douglas", "AV-8B", "Harrier II", "AV-8B Harrier"),
    ScrapeTarget("Boeing", "EA-18G", "Growler", "EA-18G Growler"),
    ScrapeTarget("Northrop Grumman", "E-2", "Hawkeye", "E-2 Hawkeye"),
    ScrapeTarget("Lockheed", "P-3", "Orion", "P-3 Orion"),
    ScrapeTarget("Lockheed", "F-117", "Nighthawk", "F-117 Nighthawk"),
    ScrapeTarget("Lockheed", "SR-71", "Blackbird", "SR-71 Blackbird"),
    ScrapeTarget("Lockheed", "U-2", "Dragon Lady", "U-2 spy plane"),
    ScrapeTarget("Vought", "F4U", "Corsair", "F4U Corsair"),
    ScrapeTarget("LTV", "A-7", "Corsair II", "A-7 Corsair"),
    ScrapeTarget("Northrop", "F-5", "Tiger II", "F-5 Tiger"),

    # Military - WWII
    ScrapeTarget("Republic", "P-47", "Thunderbolt", "P-47 Thunderbolt"),
    ScrapeTarget("Consolidated", "B-24", "Liberator", "B-24 Liberator"),
    ScrapeTarget("Boeing", "B-29", "Superfortress", "B-29 Superfortress"),
    ScrapeTarget("Avro", "Lancaster", "Standard", "Avro Lancaster"),
    ScrapeTarget("de Havilland", "Mosquito", "Standard", "de Havilland Mosquito"),
    ScrapeTarget("Hawker", "Hurricane", "Mk I", "Hawker Hurricane"),
    ScrapeTarget("Mitsubishi", "A6M", "Zero", "A6M Zero"),
    ScrapeTarget("Messerschmitt", "Me 262", "Schwalbe", "Me 262"),
    ScrapeTarget("Focke-Wulf", "Fw 190", "Wurger", "Fw 190"),
    ScrapeTarget("Ilyushin", "Il-2", "Shturmovik", "Il-2 Shturmovik"),
    ScrapeTarget("Junkers", "Ju 87", "Stuka", "Ju 87 Stuka"),
    ScrapeTarget("Heinkel", "He 111", "Standard", "Heinkel He 111"),

    # Modern Military
    ScrapeTarget("Boeing", "B-1", "Lancer", "B-1 Lancer"),
    ScrapeTarget("Tupolev", "Tu-95", "Bear", "Tu-95 Bear"),
    ScrapeTarget("Mikoyan", "MiG-15", "Fagot", "MiG-15"),
    ScrapeTarget("Mikoyan", "MiG-25", "Foxbat", "MiG-25"),
    ScrapeTarget("Sukhoi", "Su-25", "Frogfoot", "Su-25"),
    ScrapeTarget("Sukhoi", "Su-34", "Fullback", "Su-34"),
    ScrapeTarget("Saab", "JAS 39", "Gripen", "Saab Gripen"),
    ScrapeTarget("HAL", "Tejas", "Mk 1", "HAL Tejas"),
    ScrapeTarget("Mitsubishi", "F-2", "Viper Zero", "Mitsubishi F-2"),

    # Helicopters
    ScrapeTarget("Boeing", "CH-47", "Chinook", "CH-47 Chinook"),
    ScrapeTarget("Bell", "AH-1", "Cobra", "AH-1 Cobra"),
    ScrapeTarget("Mil", "Mi-24", "Hind", "Mi-24 Hind"),
    ScrapeTarget("Mil", "Mi-8", "Hip", "Mi-8"),
    ScrapeTarget("Kamov", "Ka-52", "Alligator", "Ka-52"),
    ScrapeTarget("Bell", "OH-58", "Kiowa", "OH-58 Kiowa"),
    ScrapeTarget("Robinson", "R22", "Beta", "Robinson R22"),
    ScrapeTarget("Robinson", "R44", "Raven", "Robinson R44"),
    ScrapeTarget("Bell", "206", "JetRanger", "Bell 206"),

    # Trainers
    ScrapeTarget("Beechcraft", "T-6", "Texan II", "T-6 Texan II"),
    ScrapeTarget("Pilatus", "PC-7", "Turbo Trainer", "Pilatus PC-7"),
    ScrapeTarget("Embraer", "EMB 312", "Tucano", "Embraer Tucano"),
    ScrapeTarget("BAE Systems", "Hawk", "T1", "BAE Hawk"),
    ScrapeTarget("Aero", "L-39", "Albatros", "L-39 Albatros"),

    # Turboprops
    ScrapeTarget("Beechcraft", "King Air", "200", "King Air 200"),
    ScrapeTarget("Pilatus", "PC-6", "Porter", "Pilatus Porter"),
    ScrapeTarget("de Havilland Canada", "DHC-6", "Twin Otter", "DHC-6 Twin Otter"),
    ScrapeTarget("Shorts", "360", "Standard", "Shorts 360"),

    # Additional GA aircraft
    ScrapeTarget("Beechcraft", "Musketeer", "Standard", "Beechcraft Musketeer"),
    ScrapeTarget("Maule", "M-7", "Orion", "Maule M-7"),
    ScrapeTarget("Stinson", "108", "Standard", "Stinson 108"),
    ScrapeTarget("Aeronca", "7AC", "Champion", "Aeronca Champion"),
    ScrapeTarget("Taylorcraft", "BC-12D", "Standard", "Taylorcraft BC-12D"),
    ScrapeTarget("Luscombe", "8A", "Silvaire", "Luscombe Silvaire"),
    ScrapeTarget("Ercoupe", "415", "Standard", "Ercoupe 415"),
    ScrapeTarget("Bellanca", "Citabria", "7ECA", "Bellanca Citabria"),
    ScrapeTarget("Decathlon", "8KCAB", "Standard", "Decathlon 8KCAB"),
    ScrapeTarget("Lake", "LA-4", "Buccaneer", "Lake Buccaneer"),
    ScrapeTarget("Icon", "A5", "Standard", "Icon A5"),
    ScrapeTarget("Tecnam", "P2008", "Standard", "Tecnam P2008"),
    ScrapeTarget("Flight Design", "CTLS", "Standard", "Flight Design CTLS"),
    ScrapeTarget("Pipistrel", "Alpha", "Trainer", "Pipistrel Alpha"),
    ScrapeTarget("Vans", "RV-10", "Standard", "Vans RV-10"),
    ScrapeTarget("Vans", "RV-7", "Standard", "Vans RV-7"),
    ScrapeTarget("Glasair", "Sportsman", "2+2", "Glasair Sportsman"),
    ScrapeTarget("Lancair", "IV", "Standard", "Lancair IV"),
    ScrapeTarget("Columbia", "400", "Standard", "Columbia 400"),
)
