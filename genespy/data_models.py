"""
Data models for the GA engine.

Core data structures representing individuals, binary encoding layouts,
and per-run fitness history.
"""

from dataclasses import dataclass, field
from typing import Optional, Any, List, Sequence, Tuple

from .codec import encode_fixed_point, decode_fixed_point


@dataclass
class Individual:
    """
    Represents a single candidate solution (individual in GA population).

    Attributes:
        raw_genome: Genes in the form operators manipulate (bits, permutation
            elements, floats, ...)
        data: Opaque payload attached to the individual (never evolved)
        fitness: One value per objective, or None when not yet evaluated
    """
    raw_genome: List[Any]
    data: Any = None
    fitness: Optional[List[float]] = None

    def __post_init__(self):
        """Ensure the genome is a list owned by this individual."""
        self.raw_genome = list(self.raw_genome)

    def copy(self) -> "Individual":
        """
        Create a copy of this individual.

        Returns:
            New Individual with copied genome and fitness containers
        """
        return Individual(
            raw_genome=self.raw_genome.copy(),
            data=_copy_data(self.data),
            fitness=None if self.fitness is None else list(self.fitness)
        )

    def get_genome(self) -> List[Any]:
        """
        Get the decoded ("friendly") genome.

        Plain individuals store their genome already decoded, so this is a
        copy of the raw genome.
        """
        return self.raw_genome.copy()

    def set_genome(self, genome: Sequence[Any]) -> None:
        """Set the genome from its decoded form and clear fitness."""
        self.set_raw_genome(genome)

    def set_raw_genome(self, genome: Sequence[Any]) -> None:
        """
        Replace the raw genome.

        Any change to the raw genome invalidates the fitness, so it is
        reset to None.
        """
        self.raw_genome = list(genome)
        self.fitness = None

    def is_evaluated(self) -> bool:
        return self.fitness is not None

    def __len__(self) -> int:
        return len(self.raw_genome)

    def __str__(self) -> str:
        genome = _format_values(self.raw_genome)
        fitness = '(none)' if self.fitness is None else _format_values(self.fitness)
        data = '(none)' if self.data is None else repr(self.data)
        return f"Genome: {genome}\nFitness: {fitness}\nData: {data}\n"


@dataclass(frozen=True)
class VariableSpec:
    """
    Fixed-point layout of one variable inside a binary genome.

    Attributes:
        has_sign: Whether the variable carries a leading sign bit
        integer_bits: Width of the integer field
        fraction_bits: Width of the fraction field
    """
    has_sign: bool
    integer_bits: int
    fraction_bits: int

    def __post_init__(self):
        if self.integer_bits < 0 or self.fraction_bits < 0:
            raise ValueError(
                f"Field widths must be non-negative, got "
                f"integer_bits={self.integer_bits}, fraction_bits={self.fraction_bits}"
            )

    @property
    def bits(self) -> int:
        """Total bits used by the variable, sign bit included."""
        return int(self.has_sign) + self.integer_bits + self.fraction_bits

    @property
    def scale(self) -> float:
        """Decode factor 2^-fraction_bits."""
        return 2.0 ** -self.fraction_bits


class BinarySpec:
    """
    Encoding layout shared by every individual of a binary population.

    The per-variable bit widths, offsets and decode scales are computed once
    at construction so decoding only slices and parses.

    Args:
        structure: One (has_sign, integer_bits, fraction_bits) triple or
            VariableSpec per variable

    Example:
        BinarySpec([(True, 10, 5), (False, 13, 0)])
        -> two variables, 16 + 13 = 29 bits per genome
    """

    def __init__(self, structure: Sequence[Any]):
        variables = []
        for item in structure:
            if isinstance(item, VariableSpec):
                variables.append(item)
            else:
                has_sign, integer_bits, fraction_bits = item
                variables.append(VariableSpec(bool(has_sign), int(integer_bits), int(fraction_bits)))

        self.variables: Tuple[VariableSpec, ...] = tuple(variables)
        self.var_bits = [v.bits for v in self.variables]
        self.scales = [v.scale for v in self.variables]

        self.offsets = []
        offset = 0
        for width in self.var_bits:
            self.offsets.append(offset)
            offset += width
        self.total_bits = offset

    def __len__(self) -> int:
        return len(self.variables)

    def __eq__(self, other) -> bool:
        if not isinstance(other, BinarySpec):
            return NotImplemented
        return self.variables == other.variables

    def __hash__(self) -> int:
        return hash(self.variables)

    def __repr__(self) -> str:
        triples = [(v.has_sign, v.integer_bits, v.fraction_bits) for v in self.variables]
        return f"BinarySpec({triples})"

    def decode(self, bits: Sequence[int]) -> List[float]:
        """Decode a full genome into one float per variable."""
        values = []
        for variable, offset, width, scale in zip(
            self.variables, self.offsets, self.var_bits, self.scales
        ):
            values.append(decode_fixed_point(
                bits[offset:offset + width],
                variable.has_sign,
                variable.integer_bits,
                variable.fraction_bits,
                scale
            ))
        return values

    def encode(self, values: Sequence[float]) -> List[int]:
        """
        Encode one value per variable into a full genome.

        Raises:
            ValueError: If the number of values differs from the number of variables
        """
        if len(values) != len(self.variables):
            raise ValueError(
                f"Expected {len(self.variables)} values, got {len(values)}"
            )

        bits = []
        for variable, value in zip(self.variables, values):
            bits.extend(encode_fixed_point(
                value,
                variable.has_sign,
                variable.integer_bits,
                variable.fraction_bits
            ))
        return bits


class BinaryIndividual(Individual):
    """
    Individual whose raw genome is a flat bit list decoded through a BinarySpec.

    All individuals of one population must share the same spec; the bit
    length of the genome never varies across the population.
    """

    def __init__(
        self,
        raw_genome: Sequence[int],
        spec: BinarySpec,
        data: Any = None,
        fitness: Optional[List[float]] = None
    ):
        super().__init__(raw_genome=list(raw_genome), data=data, fitness=fitness)
        self.spec = spec

    def copy(self) -> "BinaryIndividual":
        return BinaryIndividual(
            raw_genome=self.raw_genome.copy(),
            spec=self.spec,
            data=_copy_data(self.data),
            fitness=None if self.fitness is None else list(self.fitness)
        )

    def get_genome(self) -> List[float]:
        return self.spec.decode(self.raw_genome)

    def set_genome(self, genome: Sequence[float]) -> None:
        """Encode decoded values back into bits and clear fitness."""
        self.set_raw_genome(self.spec.encode(genome))

    def __eq__(self, other) -> bool:
        if not isinstance(other, BinaryIndividual):
            return NotImplemented
        return (
            self.raw_genome == other.raw_genome
            and self.spec == other.spec
            and self.data == other.data
            and self.fitness == other.fitness
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"BinaryIndividual(raw_genome={self.raw_genome!r}, spec={self.spec!r}, "
            f"data={self.data!r}, fitness={self.fitness!r})"
        )


@dataclass
class RunHistory:
    """
    Best fitness per generation, recorded by the GA drivers.

    Attributes:
        generations: Generation numbers in recording order
        best_fitness: Best individual's fitness vector for each generation
    """
    generations: List[int] = field(default_factory=list)
    best_fitness: List[Optional[List[float]]] = field(default_factory=list)

    def record(self, generation: int, fitness: Optional[Sequence[float]]) -> None:
        self.generations.append(generation)
        self.best_fitness.append(None if fitness is None else list(fitness))

    def objective_series(self, objective: int = 0) -> List[float]:
        """
        Get one objective's best value across all recorded generations.

        Args:
            objective: Index of the objective

        Returns:
            List of values (NaN where the best individual had no fitness)
        """
        return [
            float('nan') if fitness is None else fitness[objective]
            for fitness in self.best_fitness
        ]

    def __len__(self) -> int:
        return len(self.generations)


def _copy_data(data: Any) -> Any:
    if isinstance(data, (dict, list, set)):
        return data.copy()
    return data


def _format_values(values: Sequence[Any]) -> str:
    return '[' + ', '.join(str(v) for v in values) + ']'
